"""Full-text search over the blog corpus.

Modules:
- analyzers: text to ``Token`` streams (tokenizer + pluggable filters)
- schema: indexed fields and default boosts
- stats: BM25 term weighting, idf and coordination helpers
- indexer / index: one-shot build of the immutable ``Index`` snapshot
- query / bm25_engine: query parsing, candidate retrieval, scoring, ranking
- phrase: minimal-span proximity bonus
- snippet / formatter: presentation records for ranked results
"""
