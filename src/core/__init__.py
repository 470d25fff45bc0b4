"""Core domain package for fissurewatch.

Core contains reconciliation, filtering, and notification scheduling without
any HTTP, desktop or terminal-specific code, keeping the watcher portable.
"""
