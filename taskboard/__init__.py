"""Taskboard: personal to-do tasks with drag-and-drop ordering."""
