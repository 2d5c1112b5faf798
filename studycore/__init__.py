"""
studycore - spaced-repetition scheduling core for a flashcard study app.
"""
