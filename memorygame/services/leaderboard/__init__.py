"""Leaderboard services: validation and the score store.

Routes and the game engine go through `LeaderboardService`; only the
store touches the database session.
"""
