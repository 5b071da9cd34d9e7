"""
Crawl Services

One analysis flows strictly top to bottom through these modules:

1. fetcher.py - PageFetcher: bounded-timeout GET, 200-only, failure classification
2. document_analyzer.py - parse_document + analyze_document: one pre-order walk
   collecting title, markup version, headings, login form and anchor hrefs
   - login_form.py: the login-form heuristic applied to every <form>
3. link_classifier.py - resolve hrefs against the page URL, internal vs external
4. link_prober.py - LinkProber: HEAD check per resolved link, broken-link list
5. crawler.py - PageCrawler: runs 1-4, hands the result to the store, sets the
   job status
   - result_store.py: ResultStore protocol and its SQLAlchemy implementation
   - cancellation.py: CancellationToken threaded through fetch and probing
"""
