# backend/cliq_notion/settings/__init__.py

"""
ユーザーごとの通知設定（リマインダー / タスク通知）の取得・更新。
"""
