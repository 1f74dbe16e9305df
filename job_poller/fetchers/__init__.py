"""Receipt sources for the poller.

- base: ``ReceiptFetcher`` contract and ``TransportError``
- graphql: ``GraphQLReceiptFetcher`` over httpx
"""
