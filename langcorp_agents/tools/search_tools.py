import logging
from functools import lru_cache
from typing import List, Literal, Annotated

from tavily import TavilyClient
from langchain_core.tools import tool, InjectedToolArg

from langcorp_agents.config import settings


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_tavily_client() -> TavilyClient:
    """The Tavily client is built on first use so importing this module needs no API key."""
    return TavilyClient(api_key=settings.tavily_api_key)


def tavily_search_multiple(
    search_queries: List[str],
    max_results: int = 3,
    topic: Literal["general", "news", "finance"] = "general",
    ) -> List[dict]:
    """A helper function to perform a search using the Tavily API for a list of queries."""

    logger.info("--- [TOOL] Executing Tavily search for queries: %s ---", search_queries)
    client = get_tavily_client()
    search_docs = []

    # We execute the searches for each query.
    for query in search_queries:
        result = client.search(
            query,
            max_results=max_results,
            topic=topic,
        )
        search_docs.append(result)
    return search_docs


def deduplicate_search_results(search_results: List[dict]) -> dict:
    """Deduplicates a list of search results based on the URL."""
    unique_results = {}

    for response in search_results:
        for result in response.get('results', []):
            url = result['url']

            # We use the URL as a key in a dictionary to automatically handle duplicates.
            if url not in unique_results:
                unique_results[url] = result
    return unique_results


def format_search_output(unique_results: dict) -> str:
    """Formats the deduplicated search results into a clean string for the agent."""
    if not unique_results:
        return "No valid search results found."

    formatted_output = "Search results: \n\n"
    for i, (url, result) in enumerate(unique_results.items(), 1):
        formatted_output += f"\n\n--- SOURCE {i}: {result.get('title', url)} ---\n"
        formatted_output += f"URL: {url}\n\n"
        formatted_output += f"CONTENT:\n{result.get('content', '')}\n\n"
        formatted_output += "-" * 80 + "\n"
    return formatted_output


@tool(parse_docstring=True)
def tavily_search(
    query: str,
    max_results: Annotated[int, InjectedToolArg] = settings.search_max_results,
    topic: Annotated[Literal["general", "news", "finance"], InjectedToolArg] = "general",
    ) -> str:
    """
    A tool that fetches current results from the Tavily web search API.

    Args:
        query (str): A single, specific search query to execute.
        max_results (int): The maximum number of results to return.
        topic (Literal["general", "news", "finance"]): The topic to filter results by ('general', 'news', 'finance').

    Returns:
        str: A formatted string of the deduplicated search results.
    """

    # 1. Execute the search.
    search_results = tavily_search_multiple([query], max_results=max_results, topic=topic)

    # 2. Deduplicate the results.
    unique_results = deduplicate_search_results(search_results)

    # 3. Format the final output.
    return format_search_output(unique_results)
