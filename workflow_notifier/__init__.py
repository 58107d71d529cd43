"""Workflow Notifier: CI/CD workflow status notifications for Mattermost and Slack."""

__version__ = "1.0.0"
