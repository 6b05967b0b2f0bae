"""
Sample catalog used to populate an empty store on first start.
"""

from typing import Optional

from loguru import logger

from .book_repository import BookRepository


SAMPLE_BOOKS = [
    {
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "description": (
            "A tale of love, reputation, and the complexities of English society in the "
            "early 19th century. Follow Elizabeth Bennet as she navigates courtship, family "
            "expectations, and her own prejudices toward the mysterious Mr. Darcy."
        ),
        "price": 12.99,
        "category": "Classic",
        "cover_url": "https://images.unsplash.com/photo-1544947950-fa07a98d237f?w=400&h=600&fit=crop",
        "published_year": 1813,
        "pages": 432,
        "in_stock": True,
    },
    {
        "title": "The Count of Monte Cristo",
        "author": "Alexandre Dumas",
        "description": (
            "An epic tale of betrayal, imprisonment, and revenge. Young sailor Edmond Dantès "
            "is falsely accused of treason and imprisoned in the Château d'If."
        ),
        "price": 18.99,
        "category": "Adventure",
        "cover_url": "https://images.unsplash.com/photo-1543002588-bfa74002ed7e?w=400&h=600&fit=crop",
        "published_year": 1844,
        "pages": 1276,
        "in_stock": True,
    },
    {
        "title": "Wuthering Heights",
        "author": "Emily Brontë",
        "description": (
            "A haunting tale of passion and revenge on the Yorkshire moors, following "
            "Heathcliff and Catherine Earnshaw through generations of love and loss."
        ),
        "price": 11.99,
        "category": "Romance",
        "cover_url": "https://images.unsplash.com/photo-1512820790803-83ca734da794?w=400&h=600&fit=crop",
        "published_year": 1847,
        "pages": 416,
        "in_stock": True,
    },
    {
        "title": "The Picture of Dorian Gray",
        "author": "Oscar Wilde",
        "description": (
            "A philosophical novel exploring beauty, morality, and the corruption of the soul."
        ),
        "price": 10.99,
        "category": "Fiction",
        "cover_url": "https://images.unsplash.com/photo-1495640388908-05fa85288e61?w=400&h=600&fit=crop",
        "published_year": 1890,
        "pages": 254,
        "in_stock": True,
    },
    {
        "title": "Jane Eyre",
        "author": "Charlotte Brontë",
        "description": (
            "An orphaned governess falls for her brooding employer, only to discover dark "
            "secrets lurking within the walls of Thornfield Hall."
        ),
        "price": 13.99,
        "category": "Romance",
        "cover_url": "https://images.unsplash.com/photo-1476275466078-4007374efbbe?w=400&h=600&fit=crop",
        "published_year": 1847,
        "pages": 500,
        "in_stock": True,
    },
    {
        "title": "Frankenstein",
        "author": "Mary Shelley",
        "description": (
            "Victor Frankenstein's ambition leads him to create life from death, but his "
            "creature's existence becomes a tragic tale of rejection and revenge."
        ),
        "price": 9.99,
        "category": "Science Fiction",
        "cover_url": "https://images.unsplash.com/photo-1532012197267-da84d127e765?w=400&h=600&fit=crop",
        "published_year": 1818,
        "pages": 280,
        "in_stock": True,
    },
    {
        "title": "The Mysteries of Udolpho",
        "author": "Ann Radcliffe",
        "description": (
            "A gothic romance filled with supernatural terrors. Young Emily St. Aubert is "
            "held captive in the sinister castle of Udolpho."
        ),
        "price": 15.99,
        "category": "Mystery",
        "cover_url": "https://images.unsplash.com/photo-1589998059171-988d887df646?w=400&h=600&fit=crop",
        "published_year": 1794,
        "pages": 632,
        "in_stock": False,
    },
    {
        "title": "Great Expectations",
        "author": "Charles Dickens",
        "description": (
            "Orphan Pip's journey from humble beginnings to gentleman's estate in "
            "Victorian England."
        ),
        "price": 14.99,
        "category": "Classic",
        "cover_url": "https://images.unsplash.com/photo-1516979187457-637abb4f9353?w=400&h=600&fit=crop",
        "published_year": 1861,
        "pages": 544,
        "in_stock": True,
    },
    {
        "title": "The Scarlet Letter",
        "author": "Nathaniel Hawthorne",
        "description": (
            "In Puritan Massachusetts, Hester Prynne is condemned to wear a scarlet 'A'. "
            "An exploration of sin, guilt, and redemption."
        ),
        "price": 8.99,
        "category": "Fiction",
        "cover_url": "https://images.unsplash.com/photo-1497633762265-9d179a990aa6?w=400&h=600&fit=crop",
        "published_year": 1850,
        "pages": 272,
        "in_stock": True,
    },
    {
        "title": "Dracula",
        "author": "Bram Stoker",
        "description": (
            "The immortal Count Dracula travels to England seeking new blood, while "
            "Professor Van Helsing vows to stop him."
        ),
        "price": 12.99,
        "category": "Fantasy",
        "cover_url": "https://images.unsplash.com/photo-1509021436665-8f07dbf5bf1d?w=400&h=600&fit=crop",
        "published_year": 1897,
        "pages": 418,
        "in_stock": True,
    },
    {
        "title": "Les Misérables",
        "author": "Victor Hugo",
        "description": (
            "Jean Valjean's journey from prisoner to mayor, pursued by the relentless "
            "Inspector Javert through 19th-century France."
        ),
        "price": 24.99,
        "category": "History",
        "cover_url": "https://images.unsplash.com/photo-1524578271613-d550eacf6090?w=400&h=600&fit=crop",
        "published_year": 1862,
        "pages": 1488,
        "in_stock": True,
    },
    {
        "title": "The Canterbury Tales",
        "author": "Geoffrey Chaucer",
        "description": (
            "Tales told by pilgrims on their way to Canterbury, a vivid portrait of "
            "medieval English society."
        ),
        "price": 16.99,
        "category": "Poetry",
        "cover_url": "https://images.unsplash.com/photo-1456513080510-7bf3a84b82f8?w=400&h=600&fit=crop",
        "published_year": 1400,
        "pages": 504,
        "in_stock": True,
    },
]


def seed_books(repo: BookRepository, books: Optional[list[dict]] = None) -> int:
    """
    Populate the catalog if it is empty.

    Returns:
        Number of books inserted (0 when the catalog already had data)
    """
    existing = repo.count()
    if existing:
        logger.info(f"Database already has {existing} books, skipping seed.")
        return 0

    books = SAMPLE_BOOKS if books is None else books
    logger.info("Seeding database with sample books...")
    created = repo.bulk_create(books)
    logger.info(f"Successfully seeded {created} books")
    return created
