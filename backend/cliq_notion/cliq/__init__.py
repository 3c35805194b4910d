# backend/cliq_notion/cliq/__init__.py

"""
Zoho Cliq 連携用モジュール群。

現時点のスコープでは「メッセージの組み立てと送信インターフェース（ログ出力のみ）」を提供し、
実際の Cliq Bot API 呼び出しは Sender 実装を差し替えることで追加できるようにしておく。

構成:
- schemas: Cliq メッセージ（カード・ボタン）のスキーマ
- service: 送信インターフェース / LoggingCliqSender / CliqService / 応答メッセージ整形
- commands: スラッシュコマンドの解釈
- router: /api/cliq/slash, /api/cliq/message-action
"""
