# backend/cliq_notion/connection/__init__.py

"""
Notion 接続状態の判定と、接続 / 切断操作を担当するモジュール群。

- provider: 共有（フォールバック）接続の情報源
- service: ConnectionResolver（ユーザーごとの接続状態判定）と ConnectionService（接続 / 切断）
- router: /api/connection/status, /api/auth/notion/*
"""
