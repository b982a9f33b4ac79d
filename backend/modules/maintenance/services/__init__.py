# backend/modules/maintenance/services/__init__.py
"""Maintenance services module"""
