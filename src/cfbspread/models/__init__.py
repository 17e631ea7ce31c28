"""Data models for cfbspread."""

from cfbspread.models.license import LicenseVerification, VerifyResult
from cfbspread.models.odds import BookmakerLine, OddsResult
from cfbspread.models.rating import TeamRating
from cfbspread.models.spread import PICKEM, ConsensusComparison, ModelSpread

__all__ = [
    "BookmakerLine",
    "ConsensusComparison",
    "LicenseVerification",
    "ModelSpread",
    "OddsResult",
    "PICKEM",
    "TeamRating",
    "VerifyResult",
]
