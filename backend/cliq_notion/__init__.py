# backend/cliq_notion/__init__.py
"""
Cliq × Notion widget backend application package.

This package contains:
- main: FastAPI application entrypoint
- storage: persistence layer (users, tokens, mappings, settings, activity log)
- users: get-or-create resolution of the calling Cliq user
- connection: Notion connection status / connect / disconnect
- notion: Notion API client and widget endpoints
- activity: activity log recording and feed
- settings: notification settings endpoints
- cliq: Cliq messages, slash commands, message actions
- automation: hourly reminder job
"""
