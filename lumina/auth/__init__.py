"""Stand-in authentication provider: users and bearer sessions."""
