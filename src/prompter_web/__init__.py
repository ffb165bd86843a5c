"""Flask session for the movie search prompter."""
