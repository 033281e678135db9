from typing import Protocol, TypeVar

ViewerT = TypeVar("ViewerT", contravariant=True)
RequestT = TypeVar("RequestT", contravariant=True)
ResponseT = TypeVar("ResponseT", covariant=True)


class SuggestionStrategy(Protocol[ViewerT, RequestT, ResponseT]):
    """A way of delivering follow suggestions to a viewer.

    ``FeedSuggestionInjector`` splices a block into a feed the caller already
    built; ``SuggestionPaginator`` serves cursor pages over a cached ranking.
    Both rank and resolve candidates through ``CandidateResolver``.
    """

    async def suggest(self, viewer: ViewerT, request: RequestT) -> ResponseT: ...
