"""SQLite schema and storage of books, requests, reading history, bookmarks, donations and notifications."""