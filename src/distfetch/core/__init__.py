"""Core types shared by the fetch layer."""
