"""Application layer: DTOs, interfaces (ports), and services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, token service,
OTP sender, counter store).
"""
