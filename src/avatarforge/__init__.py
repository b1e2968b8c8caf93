"""AvatarForge: synthetic-influencer scene and video generation."""

__version__ = "0.1.0"
