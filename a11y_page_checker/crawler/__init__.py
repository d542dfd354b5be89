"""Page discovery: sitemap crawling and link-following website crawling."""
