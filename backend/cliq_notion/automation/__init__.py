# backend/cliq_notion/automation/__init__.py
"""
定期実行ジョブ用モジュール群（外部の cron から 1 時間ごとに起動する想定）。
"""
