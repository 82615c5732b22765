# pathagar

Building blocks for the backend of a community book-sharing library.
Members share physical books, request them from one another, review the
people they exchanged with, post reading ideas and make donations. Each
contribution moves a member's *success score*.

The package is a library: it holds the domain records, a few services with
the library's rules, SQLite storage for part of the data, and Flask handlers
that you mount on your own application.

## Layout

- `pathagar.models` – dataclasses for `User`, `Book`, `BookRequest`,
  `ReadingHistory`, `UserBookmark`, `Donation`, `ReadingIdea`, `IdeaVote`,
  `Notification` and `UserReview`, the `VoteType` enum, and
  `to_jsonable(value)`, which turns records, enums and timestamps into plain
  JSON values (a user's `password_hash` is left out).
- `pathagar.errors` – domain exceptions (`NotFoundError`,
  `UserNotFoundError`, `InvalidCredentialsError`, `InvalidTokenError`,
  `TokenExpiredError`, `EmailExistsError`, `UsernameExistsError`,
  `AlreadyExistsError`, `InvalidInputError`, `ForbiddenError`,
  `BookNotAvailableError`, `BookAlreadyBorrowedError`, all subclasses of
  `LibraryError`) and `http_status(error)`, which gives 404, 401, 409, 400
  or 403 for them and 500 for anything else.
- `pathagar.successscore.SuccessScoreService`,
  `pathagar.reviews.ReviewService`, `pathagar.users.UserService` – the rules.
  Each takes the objects it stores through as constructor arguments.
- `pathagar.repository` – storage on a `sqlite3` connection:
  `schema.create_schema(conn)` creates every table, and `BookRepository`,
  `BookmarkRepository`, `DonationRepository` and `NotificationRepository`
  read and write them.
- `pathagar.web` – Flask handlers, middleware and response helpers.

## Success scores

`SuccessScoreService(score_repo)` calls `score_repo.update_score(user_id,
change, reason, ref_type, ref_id)` with a fixed change per event:

| method                    | change |
|---------------------------|-------:|
| `process_return_on_time`  |    +10 |
| `process_return_late`     |    -15 |
| `process_positive_review` |     +5 |
| `process_negative_review` |    -10 |
| `process_idea_posted`     |     +3 |
| `process_idea_upvote`     |     +1 |
| `process_idea_downvote`   |     -1 |
| `process_lost_book`       |    -50 |
| `process_book_donation`   |    +20 |
| `process_money_donation`  |    +10 |

`adjust_score` passes an arbitrary amount, reason and reference through.

```python
from pathagar.successscore import SuccessScoreService


class ScoreLog:
    def __init__(self):
        self.changes = []

    def update_score(self, user_id, change, reason, ref_type, ref_id):
        self.changes.append((user_id, change, reason, ref_type, ref_id))


log = ScoreLog()
SuccessScoreService(log).process_return_late("u1", "b1")
# log.changes == [("u1", -15, "Returned book late", "book", "b1")]
```

`ReviewService.create(review)` gives the review a new id and timestamp,
stores it, then averages the ratings that were given (whole-number average):
4 or more counts as a positive review, below 3 as a negative one, anything
else leaves the score alone. A failing score update is logged, not raised.

## Storing books

```python
import sqlite3

from pathagar.models import Book
from pathagar.repository.book_repository import BookRepository
from pathagar.repository.schema import create_schema

conn = sqlite3.connect(":memory:")
create_schema(conn)

books = BookRepository(conn)
books.create(Book(id="b1", title="Dune", author="Frank Herbert", physical_code="PC-1"))
books.search("dune", 10, 0)      # title, author or category match
books.find_by_id("missing")      # raises NotFoundError
```

A duplicate id or physical code raises `AlreadyExistsError`;
`batch_create` inserts all books in one transaction or none of them.
`cancel_request` raises `NotFoundError` when there was no pending request.

## Serving the API

Each handler module in `pathagar.web` (`user_handler`, `review_handler`,
`bookmark_handler`, `donation_handler`, `idea_handler`,
`notification_handler`, `book_handler`, `admin_handler`,
`handover_handler`) has a handler class taking a service and a
`register_routes(blueprint, handler)` function; `auth_handler` has
`register_public_routes` and `register_protected_routes`.

```python
from flask import Blueprint, Flask

from pathagar.users import UserService
from pathagar.web import user_handler
from pathagar.web.middleware import authenticate, install_cors, install_request_logger
from pathagar.web.swagger_handler import serve_swagger_ui, serve_swagger_yaml

app = Flask(__name__)
install_cors(app)
install_request_logger(app, app.logger)

api = Blueprint("api", __name__, url_prefix="/api/v1")
api.before_request(authenticate(auth_service))       # your token checker
user_handler.register_routes(api, user_handler.UserHandler(UserService(user_repo)))
app.register_blueprint(api)

app.add_url_rule("/docs/swagger.yaml", view_func=serve_swagger_yaml)
app.add_url_rule("/docs", view_func=serve_swagger_ui)
```

- Responses are `{"success": true, "data": ...}` or
  `{"success": false, "error": "..."}`; errors that are not `LibraryError`
  are logged and reported as `internal server error` with status 500.
- `authenticate(auth_service)` expects `Authorization: Bearer <token>`,
  calls `auth_service.validate_token(token)` and keeps the claims'
  `user_id` and `role` for `get_user_id()` and `get_user_role()`; otherwise
  it answers 401 with `{"error": "..."}`. `require_admin()` answers 403 for
  anyone whose role is not `admin`.
- `install_cors(app)` allows `http://localhost:3000`,
  `http://localhost:5173` and the comma-separated origins in the
  `CORS_ALLOWED_ORIGINS` environment variable, read when it is installed.
  Other cross-origin requests get 403.
- `serve_swagger_yaml()` returns the first of `docs/swagger.yaml`,
  `../docs/swagger.yaml` or `amar-pathagar-backend/docs/swagger.yaml` found
  from the working directory, or a 404 listing the paths tried.

## What the package does not do

- It has no command and no server runner; you build the Flask application
  yourself.
- It stores books, book requests, reading history, bookmarks, donations and
  notifications, but has no storage classes for users, reviews, reading
  ideas or score history, although `create_schema` creates those tables.
  `UserService`, `ReviewService` and `SuccessScoreService` must be given
  objects that do that storage.
- It has no token issuing or checking, and no services behind the book,
  bookmark, donation, idea, notification, handover, admin or auth handlers;
  those handlers call whatever service object you pass them.