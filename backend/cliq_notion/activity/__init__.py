# backend/cliq_notion/activity/__init__.py

"""
操作履歴（activity_log）の記録と取得を担当するモジュール群。

- service: ActivityLogger（記録の形を揃える薄いラッパー）
- schemas: フィード表示用モデル
- router: GET /api/activity
"""
