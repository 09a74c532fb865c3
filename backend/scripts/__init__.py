"""
Backend Scripts Module

This module contains utility scripts for database operations and maintenance.

Available scripts:
    - seed_admin.py: Creates the initial admin account

Usage:
    python -m scripts.seed_admin
"""
