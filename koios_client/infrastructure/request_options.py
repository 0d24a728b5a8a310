"""Per-call request options: query parameters, headers and pagination."""

from typing import Any, Mapping, Optional, Union

import httpx

from ..application.exceptions import ErrorKind, RequestOptionsError

PAGE_SIZE = 1000

QueryLike = Union[httpx.QueryParams, Mapping[str, Any]]
HeadersLike = Union[httpx.Headers, Mapping[str, str]]


class RequestOptions:
    """
    Query parameters, headers and pagination for exactly one request.

    The client locks the options when it dispatches them; from then on any
    mutation raises RequestOptionsError. Use ``clone()`` to reuse a template.
    """

    def __init__(self):
        self._query = httpx.QueryParams()
        self._headers = httpx.Headers()
        self._page = 1
        self._page_size = PAGE_SIZE
        self._locked = False

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def query(self) -> httpx.QueryParams:
        return self._query

    @property
    def headers(self) -> httpx.Headers:
        return self._headers

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    def _check_unlocked(self):
        if self._locked:
            raise RequestOptionsError(ErrorKind.REQUEST_OPTIONS_USED)

    # --- Query ---

    def query_set(self, key: str, value: Any) -> "RequestOptions":
        """Set ``key`` to ``value``, replacing any existing values."""
        self._check_unlocked()
        self._query = self._query.set(key, value)
        return self

    def query_add(self, key: str, value: Any) -> "RequestOptions":
        """Append ``value`` to ``key``, keeping existing values."""
        self._check_unlocked()
        self._query = self._query.add(key, value)
        return self

    def query_apply(self, params: QueryLike) -> "RequestOptions":
        """Append every value of ``params``."""
        self._check_unlocked()
        for key, value in httpx.QueryParams(params).multi_items():
            self._query = self._query.add(key, value)
        return self

    # --- Headers ---

    def header_set(self, key: str, value: str) -> "RequestOptions":
        self._check_unlocked()
        self._headers[key] = value
        return self

    def header_add(self, key: str, value: str) -> "RequestOptions":
        self._check_unlocked()
        self._headers = httpx.Headers(
            self._headers.multi_items() + [(key, value)]
        )
        return self

    def header_apply(self, headers: HeadersLike) -> "RequestOptions":
        self._check_unlocked()
        self._headers = httpx.Headers(
            self._headers.multi_items() + httpx.Headers(headers).multi_items()
        )
        return self

    # --- Pagination ---

    def set_page_size(self, size: int) -> "RequestOptions":
        """
        Set the number of rows per page.

        Raises:
            RequestOptionsError: If the options are locked or size < 1.
        """
        self._check_unlocked()
        if size < 1:
            raise RequestOptionsError(
                ErrorKind.INVALID_PAGINATION, f"page size {size}"
            )
        self._page_size = size
        return self

    def set_current_page(self, page: int) -> "RequestOptions":
        """
        Select the 1-based page to fetch.

        Raises:
            RequestOptionsError: If the options are locked or page < 1.
        """
        self._check_unlocked()
        if page < 1:
            raise RequestOptionsError(
                ErrorKind.INVALID_PAGINATION, f"page {page}"
            )
        self._page = page
        return self

    def range_header(self) -> Optional[str]:
        """The ``Range`` value for the current page, None for the default."""
        if self._page_size == PAGE_SIZE and self._page == 1:
            return None
        start = self._page_size * self._page - self._page_size
        end = start + self._page_size - 1
        return f"{start}-{end}"

    def clone(self) -> "RequestOptions":
        """Return an unlocked, independent copy."""
        other = RequestOptions()
        other._query = httpx.QueryParams(self._query.multi_items())
        other._headers = self._headers.copy()
        other._page = self._page
        other._page_size = self._page_size
        return other

    def lock(self):
        """
        Mark the options as used and materialize the ``Range`` header.

        Raises:
            RequestOptionsError: If the options were already locked.
        """
        self._check_unlocked()
        self._locked = True
        range_value = self.range_header()
        if range_value is not None:
            self._headers["Range"] = range_value

    def __repr__(self) -> str:
        return (
            f"RequestOptions(query={str(self._query)!r}, page={self._page}, "
            f"page_size={self._page_size}, locked={self._locked})"
        )
