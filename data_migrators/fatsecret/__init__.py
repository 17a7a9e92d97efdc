# -*- coding: utf-8 -*-
"""FatSecret provider: OAuth1 authorization and food diary export."""

from .auth import OAuthFlow
from .client import FatSecretClient
from .diary import fetch_diary
from .oauth1 import OAuth1Session, OAuth1Signer

__all__ = ["OAuthFlow", "FatSecretClient", "fetch_diary", "OAuth1Session", "OAuth1Signer"]
