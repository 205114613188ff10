"""Application layer: dispatcher, interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, cache, signer).
"""
