"""
Saved credit cards: gateway tokenization and the single active card per user.
"""
