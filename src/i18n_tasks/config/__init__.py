"""Configuration loading and validation for i18n-tasks."""
