"""Jokester — a small server-rendered jokes site."""
