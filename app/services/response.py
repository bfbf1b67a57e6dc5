class ListResponseMixin:
    """Wraps a service's ``list`` result in the paginated envelope.

    ``list`` must take ``limit`` and ``offset`` as its last two arguments.
    """

    def list_response(self, db, *args, **kwargs) -> dict:
        items = self.list(db, *args, **kwargs)
        if "limit" in kwargs:
            limit, offset = kwargs["limit"], kwargs.get("offset", 0)
        else:
            limit, offset = args[-2], args[-1]
        return {"items": items, "count": len(items), "limit": limit, "offset": offset}
