"""Core domain logic for patient engagement scoring and reminders.

This package contains the business rules and domain models,
isolated from storage and transport so they stay easy to test and reason about.
"""
