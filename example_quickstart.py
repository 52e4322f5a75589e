"""
pygoose-paginate Quick Start Example

Features covered:
- Add pagination to a document
- Page and offset positioning
- Lean results and populate
- Callback delivery

Run with: python example_quickstart.py
(needs a MongoDB server on localhost:27017)
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

from pygoose_paginate import Document, PaginateMixin, Paginator, Ref, connect, disconnect


class Author(Document):
    name: str

    class Settings:
        collection = "quickstart_authors"


class Book(PaginateMixin, Document):
    title: str
    published: Optional[datetime] = None
    author: Ref["Author"] = None

    class Settings:
        collection = "quickstart_books"
        paginate_defaults = {"limit": 5, "sort": "-published"}


async def main():
    db = await connect("mongodb://localhost:27017/pygoose_paginate_quickstart")

    try:
        author = await Author.create(name="Arthur Conan Doyle")
        start = datetime.now(timezone.utc)
        await Book.insert_many(
            [
                Book(title=f"Book #{i}", published=start + timedelta(days=i), author=author.id)
                for i in range(1, 23)
            ]
        )

        # Page mode, model defaults apply (5 per page, newest first)
        page = await Book.paginate(options={"page": 2})
        print(f"Page {page.paging.current_page}/{page.paging.total_pages}:")
        for book in page.data:
            print(f"  {book.title}")

        # Offset mode with lean dicts and the author expanded
        window = await Book.paginate(
            {}, {"offset": 7, "limit": 3, "lean": True, "populate": "author", "sort": "published"}
        )
        print(window.paging.to_dict())
        for doc in window.data:
            print(f"  {doc['id']} {doc['title']} by {doc['author']['name']}")

        # Totals only
        totals = await Book.paginate(options={"limit": 0})
        print(f"{totals.paging.total_items} books")

        # Callback style
        def on_page(err, result):
            if err is not None:
                print(f"failed: {err}")
                return
            print(f"callback got {len(result.data)} books")

        await Book.paginate({"title": "Book #3"}, None, on_page)

        # A Paginator over any store, with its own defaults
        paginator = Paginator(Book, defaults={"limit": 10, "lean": True})
        result = await paginator.paginate()
        print(result.to_dict()["paging"])
    finally:
        for name in await db.list_collection_names():
            await db.drop_collection(name)
        await disconnect()


if __name__ == "__main__":
    asyncio.run(main())
