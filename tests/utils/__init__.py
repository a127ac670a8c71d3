"""Shared test utilities for i18n-tasks tests."""
