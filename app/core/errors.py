"""Erreurs métier de l'arbre de pages.

Les services lèvent ces exceptions, le handler enregistré dans app.main
les traduit en réponse HTTP (status_code + detail).
"""


class PageError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PageNotFound(PageError):
    status_code = 404


class InvalidArgument(PageError):
    status_code = 400


class Unauthorized(PageError):
    status_code = 401


class Internal(PageError):
    status_code = 500
