# app/crud/crud_validated_word.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.schemas.validated_word import ValidatedWord

def is_word_validated(db: Session, word: str, category: str) -> bool:
    """`word` must already be normalized, `category` is the internal category name."""
    return db.query(ValidatedWord.id).filter(
        ValidatedWord.word == word,
        ValidatedWord.category == category,
    ).first() is not None

def save_validated_word(db: Session, word: str, category: str) -> bool:
    """
    Inserts the pair if absent. Returns True when a row was created, False when it
    already existed (a concurrent writer winning the unique constraint counts as existing).
    """
    if is_word_validated(db, word, category):
        return False
    db.add(ValidatedWord(word=word, category=category))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True

def count_validated_words(db: Session, category: str | None = None) -> int:
    query = db.query(ValidatedWord)
    if category:
        query = query.filter(ValidatedWord.category == category)
    return query.count()
