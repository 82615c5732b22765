"""Flask handlers, middleware, JSON responses and API-description pages for the library."""