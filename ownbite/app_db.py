# -*- coding: utf-8 -*-
"""App database — SQLite helpers and schema."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        created_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS profiles (
        user_id TEXT PRIMARY KEY,
        full_name TEXT,
        avatar_url TEXT,
        role TEXT NOT NULL DEFAULT 'user',
        subscription_status TEXT NOT NULL DEFAULT 'free',
        subscription_end_date TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS food_entries (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        calories REAL NOT NULL DEFAULT 0,
        protein REAL NOT NULL DEFAULT 0,
        carbs REAL NOT NULL DEFAULT 0,
        fat REAL NOT NULL DEFAULT 0,
        image_url TEXT,
        timestamp TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_food_entries_user_ts ON food_entries(user_id, timestamp);",
    """
    CREATE TABLE IF NOT EXISTS food_scans (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        image_url TEXT,
        total_calories REAL NOT NULL DEFAULT 0,
        total_protein REAL NOT NULL DEFAULT 0,
        total_carbs REAL NOT NULL DEFAULT 0,
        total_fat REAL NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS food_items (
        id TEXT PRIMARY KEY,
        scan_id TEXT NOT NULL,
        name TEXT NOT NULL,
        calories REAL NOT NULL DEFAULT 0,
        protein REAL NOT NULL DEFAULT 0,
        carbs REAL NOT NULL DEFAULT 0,
        fat REAL NOT NULL DEFAULT 0,
        health_benefits TEXT,
        health_risks TEXT,
        FOREIGN KEY(scan_id) REFERENCES food_scans(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS scan_images (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        content_type TEXT NOT NULL,
        size_bytes INTEGER NOT NULL,
        stored_relpath TEXT NOT NULL,
        created_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS nutrition_goals (
        user_id TEXT PRIMARY KEY,
        calories_goal REAL NOT NULL,
        protein_goal_g REAL NOT NULL,
        fat_goal_g REAL NOT NULL,
        carbs_goal_g REAL NOT NULL,
        gender TEXT,
        weight_kg REAL,
        height_cm REAL,
        age INTEGER,
        activity_level TEXT,
        goal_type TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS daily_goal_logs (
        user_id TEXT NOT NULL,
        log_date TEXT NOT NULL,
        actual_calories REAL NOT NULL DEFAULT 0,
        actual_protein_g REAL NOT NULL DEFAULT 0,
        actual_fat_g REAL NOT NULL DEFAULT 0,
        actual_carbs_g REAL NOT NULL DEFAULT 0,
        met_calories_goal INTEGER NOT NULL DEFAULT 0,
        met_protein_goal INTEGER NOT NULL DEFAULT 0,
        met_fat_goal INTEGER NOT NULL DEFAULT 0,
        met_carbs_goal INTEGER NOT NULL DEFAULT 0,
        overall_goal_met INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        PRIMARY KEY (user_id, log_date),
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS bloodwork_results (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        file_name TEXT,
        content_type TEXT,
        stored_relpath TEXT,
        source_type TEXT NOT NULL,
        notes TEXT,
        parsed_data TEXT,
        analysis_complete INTEGER NOT NULL DEFAULT 0,
        uploaded_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_bloodwork_user_uploaded ON bloodwork_results(user_id, uploaded_at DESC);",
    """
    CREATE TABLE IF NOT EXISTS user_nutrient_status (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        bloodwork_id TEXT,
        nutrient_name TEXT NOT NULL,
        current_value REAL,
        unit TEXT,
        status TEXT NOT NULL,
        recommendations_applied INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
        FOREIGN KEY(bloodwork_id) REFERENCES bloodwork_results(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS meal_plans (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        target_nutrients TEXT NOT NULL,
        plan_data TEXT NOT NULL,
        is_active INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS community_recipes (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        ingredients TEXT NOT NULL,
        instructions TEXT NOT NULL,
        tags TEXT NOT NULL,
        image_url TEXT,
        nutrition TEXT,
        is_public INTEGER NOT NULL DEFAULT 1,
        remix_of TEXT,
        like_count INTEGER NOT NULL DEFAULT 0,
        comment_count INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
        FOREIGN KEY(remix_of) REFERENCES community_recipes(id) ON DELETE SET NULL
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_recipes_user_created ON community_recipes(user_id, created_at DESC);",
    """
    CREATE TABLE IF NOT EXISTS recipe_likes (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        recipe_id TEXT NOT NULL,
        created_at TEXT NOT NULL,
        UNIQUE (user_id, recipe_id),
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
        FOREIGN KEY(recipe_id) REFERENCES community_recipes(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS recipe_comments (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        recipe_id TEXT NOT NULL,
        content TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
        FOREIGN KEY(recipe_id) REFERENCES community_recipes(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS user_follows (
        id TEXT PRIMARY KEY,
        follower_id TEXT NOT NULL,
        following_id TEXT NOT NULL,
        created_at TEXT NOT NULL,
        UNIQUE (follower_id, following_id),
        FOREIGN KEY(follower_id) REFERENCES users(id) ON DELETE CASCADE,
        FOREIGN KEY(following_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS recipe_collections (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        description TEXT,
        is_public INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS collection_recipes (
        collection_id TEXT NOT NULL,
        recipe_id TEXT NOT NULL,
        created_at TEXT NOT NULL,
        PRIMARY KEY (collection_id, recipe_id),
        FOREIGN KEY(collection_id) REFERENCES recipe_collections(id) ON DELETE CASCADE,
        FOREIGN KEY(recipe_id) REFERENCES community_recipes(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS grocery_lists (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        is_public INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS grocery_list_items (
        id TEXT PRIMARY KEY,
        list_id TEXT NOT NULL,
        name TEXT NOT NULL,
        quantity TEXT NOT NULL DEFAULT '',
        category TEXT NOT NULL DEFAULT '',
        is_checked INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        FOREIGN KEY(list_id) REFERENCES grocery_lists(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS affiliates (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL UNIQUE,
        referral_code TEXT NOT NULL UNIQUE,
        full_name TEXT,
        bio TEXT,
        social_links TEXT NOT NULL DEFAULT '{}',
        approved INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS referrals (
        id TEXT PRIMARY KEY,
        referred_user_id TEXT NOT NULL UNIQUE,
        affiliate_id TEXT NOT NULL,
        source TEXT NOT NULL,
        hashtag TEXT NOT NULL,
        joined_at TEXT NOT NULL,
        FOREIGN KEY(referred_user_id) REFERENCES users(id) ON DELETE CASCADE,
        FOREIGN KEY(affiliate_id) REFERENCES affiliates(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS affiliate_commissions (
        id TEXT PRIMARY KEY,
        affiliate_id TEXT NOT NULL,
        referral_id TEXT NOT NULL,
        amount REAL NOT NULL,
        status TEXT NOT NULL,
        generated_at TEXT NOT NULL,
        paid_at TEXT,
        FOREIGN KEY(affiliate_id) REFERENCES affiliates(id) ON DELETE CASCADE,
        FOREIGN KEY(referral_id) REFERENCES referrals(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS reminders (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        due_date TEXT,
        type TEXT NOT NULL,
        priority TEXT NOT NULL,
        is_completed INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS social_accounts (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        provider TEXT NOT NULL,
        provider_user_id TEXT,
        username TEXT,
        access_token TEXT,
        refresh_token TEXT,
        token_expires_at TEXT,
        profile_image_url TEXT,
        is_connected INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE (user_id, provider),
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS social_shares (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        content_type TEXT NOT NULL,
        content_id TEXT NOT NULL,
        provider TEXT NOT NULL,
        share_url TEXT NOT NULL,
        share_image_url TEXT,
        share_text TEXT NOT NULL,
        share_status TEXT NOT NULL,
        hashtags TEXT NOT NULL,
        created_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS user_rewards (
        user_id TEXT PRIMARY KEY,
        points INTEGER NOT NULL DEFAULT 0,
        lifetime_points INTEGER NOT NULL DEFAULT 0,
        tier TEXT NOT NULL DEFAULT 'Bronze',
        last_updated TEXT NOT NULL,
        created_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS reward_events (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        event_type TEXT NOT NULL,
        points_awarded INTEGER NOT NULL,
        context TEXT NOT NULL DEFAULT '{}',
        created_at TEXT NOT NULL,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS reward_items (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        image_url TEXT,
        points_cost INTEGER NOT NULL,
        required_tier TEXT NOT NULL DEFAULT 'Bronze',
        category TEXT NOT NULL,
        is_digital INTEGER NOT NULL DEFAULT 1,
        stock_quantity INTEGER,
        is_active INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL
    );
    """,
    """
    INSERT OR IGNORE INTO reward_items
        (id, name, description, points_cost, required_tier, category, is_digital, stock_quantity, created_at)
    VALUES
        ('recipe-ebook', 'Healthy Recipes eBook', 'Fifty high-protein recipes as a PDF download.',
            250, 'Bronze', 'Content', 1, NULL, '2026-01-01T00:00:00Z'),
        ('custom-theme', 'Custom App Theme', 'Unlock an extra colour theme for the app.',
            300, 'Bronze', 'Customization', 1, NULL, '2026-01-01T00:00:00Z'),
        ('premium-month', 'One Month Premium', 'Thirty days of premium features.',
            800, 'Silver', 'Subscription', 1, NULL, '2026-01-01T00:00:00Z'),
        ('coach-session', 'Nutritionist Session', 'A 30-minute video call with a registered dietitian.',
            1500, 'Gold', 'Service', 0, 20, '2026-01-01T00:00:00Z'),
        ('water-bottle', 'OwnBite Water Bottle', 'Insulated steel bottle, shipped to your address.',
            1200, 'Gold', 'Physical', 0, 50, '2026-01-01T00:00:00Z'),
        ('cooking-class', 'Live Cooking Class', 'A seat in a members-only online cooking class.',
            2500, 'Platinum', 'Event', 1, 10, '2026-01-01T00:00:00Z');
    """,
    """
    CREATE TABLE IF NOT EXISTS reward_redemptions (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        reward_item_id TEXT NOT NULL,
        reward_name TEXT NOT NULL,
        reward_description TEXT NOT NULL DEFAULT '',
        reward_image_url TEXT,
        points_spent INTEGER NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending',
        redemption_code TEXT,
        is_digital INTEGER NOT NULL DEFAULT 1,
        delivery_details TEXT NOT NULL DEFAULT '{}',
        created_at TEXT NOT NULL,
        fulfilled_at TEXT,
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
        FOREIGN KEY(reward_item_id) REFERENCES reward_items(id)
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_reward_redemptions_user ON reward_redemptions(user_id, created_at);",
    """
    CREATE TABLE IF NOT EXISTS activity_logs (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        log_date TEXT NOT NULL,
        sitting_hours REAL NOT NULL DEFAULT 0,
        driving_hours REAL NOT NULL DEFAULT 0,
        screen_time_hours REAL NOT NULL DEFAULT 0,
        screen_time_breakdown TEXT NOT NULL DEFAULT '{}',
        sleep_hours REAL NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE(user_id, log_date),
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS hydration_logs (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        log_date TEXT NOT NULL,
        hydration_pct REAL NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE(user_id, log_date),
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS fast_food_logs (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        log_date TEXT NOT NULL,
        is_fast_food INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE(user_id, log_date),
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS substance_logs (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        log_date TEXT NOT NULL,
        substance_type TEXT NOT NULL,
        amount REAL NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE(user_id, log_date, substance_type),
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS diet_spending (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        log_date TEXT NOT NULL,
        category TEXT NOT NULL,
        amount REAL NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE(user_id, log_date, category),
        FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
)


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_app_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        cur = conn.cursor()
        for statement in _SCHEMA:
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()
