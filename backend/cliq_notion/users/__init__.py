# backend/cliq_notion/users/__init__.py

"""
Cliq ユーザーの引き当て（get-or-create）を担当するモジュール群。
"""
