import logging
from typing import Any, Dict, Optional

import httpx

from .registry import ToolDescriptor

logger = logging.getLogger(__name__)

DUCKDUCKGO_URL = "https://api.duckduckgo.com/"
MAX_RELATED_TOPICS = 5

# Use a browser-like User-Agent to avoid being blocked
BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept-Language": "en-US,en;q=0.5",
    "Referer": "https://duckduckgo.com/",
}


async def search(query: str, client: Optional[httpx.AsyncClient] = None) -> Dict[str, Any]:
    """
    Query the DuckDuckGo instant answer API.

    Returns the abstract and up to five related topics. When there is no
    abstract the first related topic stands in for it.

    Args:
        query (str): Search terms.
        client (httpx.AsyncClient, optional): Client to reuse; a short-lived one is created otherwise.

    Raises:
        ValueError: If the query is blank.
        RuntimeError: If the request fails.
    """
    if not query or not isinstance(query, str) or not query.strip():
        raise ValueError("A valid search query is required")

    params = {"q": query, "format": "json", "no_html": 1, "skip_disambig": 1, "t": "web"}
    logger.debug("Executing DuckDuckGo search for query: %r", query)
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=30.0, headers=BROWSER_HEADERS) as http_client:
                response = await http_client.get(DUCKDUCKGO_URL, params=params)
        else:
            response = await client.get(DUCKDUCKGO_URL, params=params, headers=BROWSER_HEADERS)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise RuntimeError(f"Failed to search DuckDuckGo: {exc}") from exc

    results: Dict[str, Any] = {
        "abstract": data.get("Abstract") or "",
        "abstractSource": data.get("AbstractSource") or "",
        "abstractURL": data.get("AbstractURL") or "",
        "relatedTopics": [
            {"text": topic["Text"], "url": topic.get("FirstURL")}
            for topic in data.get("RelatedTopics") or []
            if isinstance(topic, dict) and topic.get("Text")
        ][:MAX_RELATED_TOPICS],
    }

    if not results["abstract"] and results["relatedTopics"]:
        first = results["relatedTopics"][0]
        results.update(abstract=first["text"], abstractURL=first["url"], abstractSource="DuckDuckGo")

    if not results["abstract"] and not results["relatedTopics"]:
        return {"message": f'No results found for "{query}"', "query": query}

    return results


async def duckduckgo_search(args: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    client = context.get("http") if isinstance(context, dict) else None
    return await search(args.get("query", ""), client=client)


duckduckgo_search_tool = ToolDescriptor(
    name="duckduckgo_search",
    description=(
        "Search the web using DuckDuckGo. Provides search results for a given query.\n"
        "Examples:\n"
        '- "python asyncio" -> {"query": "python asyncio"}\n'
        '- "climate change facts" -> {"query": "climate change facts"}'
    ),
    progress_text="Searching DuckDuckGo...",
    parameters={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "The search query to send to DuckDuckGo",
            },
        },
        "required": ["query"],
    },
    execute=duckduckgo_search,
)
