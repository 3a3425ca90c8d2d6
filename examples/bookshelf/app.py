"""Bookshelf — a tiny JSON API with hit counting.

Demonstrates method shortcuts, path parameters, a catch-all route,
collaborator handlers, and the ``/endpoints`` coverage listings.

Run:
    python app.py
    curl http://127.0.0.1:8000/books/1
    curl http://127.0.0.1:8000/endpoints/unhit
"""

from hitrouter import HitRouter, Request, Response

BOOKS: dict[int, dict[str, str]] = {
    1: {"title": "Dune", "author": "Frank Herbert"},
    2: {"title": "Solaris", "author": "Stanislaw Lem"},
}


def not_found(request: Request):
    return f"Nothing on the shelf at {request.path}"


def recover(request: Request, exc: Exception):
    return Response(f"Shelf collapsed: {exc}", status=500)


router = HitRouter(not_found=not_found, panic_handler=recover)


@router.route("/books")
def list_books():
    return [{"id": book_id, **book} for book_id, book in sorted(BOOKS.items())]


@router.route("/books/:id")
def show_book(id: int):
    book = BOOKS.get(id)
    if book is None:
        return {"error": f"no book {id}"}, 404
    return {"id": id, **book}


async def add_book(request: Request):
    data = await request.json()
    book_id = max(BOOKS, default=0) + 1
    BOOKS[book_id] = {"title": data["title"], "author": data["author"]}
    return {"id": book_id}, 201


def remove_book(id: int):
    BOOKS.pop(id, None)


def browse(shelf: str):
    return f"Browsing shelf {shelf}"


def broken():
    raise RuntimeError("loose bracket")


router.post("/books", add_book)
router.delete("/books/:id", remove_book)
router.get("/browse/*shelf", browse)
router.get("/broken", broken)


if __name__ == "__main__":
    router.run()
