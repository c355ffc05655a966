"""Constantes partagées pour l'application."""

# Tranches de nombre de pièces pour les meilleurs temps
PIECE_BRACKETS = (250, 500, 750, 1000, 1500, 2000)
PIECE_BRACKET_TOLERANCE = 50  # |pieces - tranche| <= 50

# Bornes de progression et de notation
PROGRESS_MIN = 0
PROGRESS_MAX = 100
RATING_MIN = 1
RATING_MAX = 5

NOTES_MAX_LENGTH = 2000

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
