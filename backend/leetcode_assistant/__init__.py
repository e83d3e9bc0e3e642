"""LeetCode problem assistant: context-aware prompting around a chat model."""

__version__ = "0.1.0"
