"""Acceptance selection of the truth tracks to be matched."""

from gemcsc.config.matching import SimTrackConfig
from gemcsc.utils.logger import logger

__all__ = ["TrackSelector"]


class TrackSelector:
    """Selects the truth tracks which are worth matching.

    A track is rejected if it has no vertex or generator particle, is not a
    muon (optionally), has a transverse momentum below threshold or has a
    pseudorapidity outside of the acceptance window.
    """

    def __init__(
        self,
        min_pt=3.0,
        min_eta=1.45,
        max_eta=2.5,
        only_muon=True,
        verbose=0,
    ):
        """Store the selection thresholds.

        Parameters
        ----------
        min_pt : float, default 3.
            Minimum transverse momentum (GeV/c)
        min_eta : float, default 1.45
            Minimum absolute pseudorapidity
        max_eta : float, default 2.5
            Maximum absolute pseudorapidity
        only_muon : bool, default True
            If `True`, only select muons
        verbose : int, default 0
            If non-zero, log the kinematics of the selected tracks
        """
        self.min_pt = min_pt
        self.min_eta = min_eta
        self.max_eta = max_eta
        self.only_muon = only_muon
        self.verbose = verbose

    @classmethod
    def from_config(cls, cfg: SimTrackConfig):
        """Builds the selector from a validated track selection block.

        Parameters
        ----------
        cfg : SimTrackConfig
            Track selection configuration

        Returns
        -------
        TrackSelector
            Track selector
        """
        return cls(cfg.min_pt, cfg.min_eta, cfg.max_eta, cfg.only_muon, cfg.verbose)

    def accept(self, track) -> bool:
        """Checks whether a truth track passes the acceptance selection.

        Parameters
        ----------
        track : SimTrack
            Truth track

        Returns
        -------
        bool
            `True` if the track should be matched
        """
        if track.no_vertex or track.no_genpart:
            return False
        if self.only_muon and not track.is_muon:
            return False
        if track.pt < self.min_pt:
            return False

        abs_eta = abs(track.eta)
        if abs_eta > self.max_eta or abs_eta < self.min_eta:
            return False

        if self.verbose:
            logger.info(
                "Selected track %d: pt = %.3f, eta = %.3f, phi = %.3f, charge = %d",
                track.id,
                track.pt,
                track.eta,
                track.phi,
                track.charge,
            )

        return True

    def __call__(self, track) -> bool:
        """Alias of :meth:`accept`."""
        return self.accept(track)
