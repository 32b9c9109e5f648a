"""Builds the CSC/GEM chamber delta records of a truth track.

For each CSC chamber with enough comparator layers, the positions of the
track in the chamber (simulated hits, digis, LCT) are compared with its
positions in the GEM superchamber of the same endcap and chamber number.
"""

from typing import List

from gemcsc.config.matching import MatchingConfig
from gemcsc.data import TrackChamberDeltaRecord
from gemcsc.math import delta_phi
from gemcsc.utils.globals import LCT_BEND_PATTERN, MIN_POSITION_Z
from gemcsc.utils.logger import logger

__all__ = ["DeltaBuilder"]


class DeltaBuilder:
    """Produces one delta record per matching (CSC chamber, GEM superchamber).

    Attributes
    ----------
    min_strip_layers : int
        Minimum number of CSC layers with comparator digis
    min_wire_layers : int
        Minimum number of CSC layers with wire digis
    """

    def __init__(self, config: MatchingConfig):
        """Initialize the builder.

        Parameters
        ----------
        config : MatchingConfig
            Matching configuration
        """
        self.min_strip_layers = config.threshold("csc_strip_digi")
        self.min_wire_layers = config.threshold("csc_wire_digi")

    def accept(self, manager) -> bool:
        """Whether the track has enough CSC layers and at least one GEM pad.

        Parameters
        ----------
        manager : MatchManager
            Accessors over the responses matched to the truth track

        Returns
        -------
        bool
            `True` if the delta records of the track should be built
        """
        cd = manager.csc_digis
        return (
            manager.gem_digis.n_pads() > 0
            and cd.n_coincidence_strip_chambers(self.min_strip_layers) > 0
            and cd.n_coincidence_wire_chambers(self.min_wire_layers) > 0
        )

    def build(self, manager) -> List[TrackChamberDeltaRecord]:
        """Builds the delta records of a truth track.

        Parameters
        ----------
        manager : MatchManager
            Accessors over the responses matched to the truth track

        Returns
        -------
        List[TrackChamberDeltaRecord]
            Delta records, in (CSC chamber, GEM superchamber) order
        """
        if not self.accept(manager):
            return []

        sh, cd = manager.sim_hits, manager.csc_digis
        stubs, gd = manager.csc_stubs, manager.gem_digis
        track = manager.sim_track

        records = []
        for csc_id in cd.strip_chamber_ids():
            if cd.strip_layer_count(csc_id) < self.min_strip_layers:
                continue

            csc_sh_gp = sh.mean_position(sh.csc_hits_in_chamber(csc_id))
            csc_dg_gp = cd.median_position(
                cd.strip_digis_in_chamber(csc_id), cd.wire_digis_in_chamber(csc_id)
            )
            if abs(csc_dg_gp.z) < MIN_POSITION_Z:
                logger.warning("Bad CSC digi position in chamber %s, skipping.", csc_id)
                continue

            lct = stubs.lct_in_chamber(csc_id)
            lct_gp = stubs.digi_position(lct) if lct.is_valid else None

            for gem_id in gd.superchamber_ids():
                if gem_id.region != csc_id.region or gem_id.chamber != csc_id.chamber:
                    continue

                gem_sh = sh.gem_hits_in_superchamber(gem_id)
                gem_dg = gd.digis_in_superchamber(gem_id)
                gem_pads = gd.pads_in_superchamber(gem_id)
                if not len(gem_sh) or not len(gem_dg) or not len(gem_pads):
                    continue

                gem_sh_gp = sh.mean_position(gem_sh)
                _, gem_dg_gp = gd.closest_to(gem_dg, csc_dg_gp)
                best_pad, gem_pad_gp = gd.closest_to(gem_pads, csc_dg_gp)

                rec = TrackChamberDeltaRecord(
                    odd=csc_id.chamber & 1,
                    charge=int(track.charge),
                    chamber=csc_id.chamber,
                    endcap=csc_id.endcap,
                    roll=best_pad.det_id.roll,
                    pt=track.pt,
                    eta=track.eta,
                    phi=track.phi,
                    csc_sh_phi=csc_sh_gp.phi,
                    csc_dg_phi=csc_dg_gp.phi,
                    gem_sh_phi=gem_sh_gp.phi,
                    gem_dg_phi=gem_dg_gp.phi,
                    gem_pad_phi=gem_pad_gp.phi,
                    dphi_sh=delta_phi(csc_sh_gp.phi, gem_sh_gp.phi),
                    dphi_dg=delta_phi(csc_dg_gp.phi, gem_dg_gp.phi),
                    dphi_pad=delta_phi(csc_dg_gp.phi, gem_pad_gp.phi),
                    csc_sh_eta=csc_sh_gp.eta,
                    csc_dg_eta=csc_dg_gp.eta,
                    gem_sh_eta=gem_sh_gp.eta,
                    gem_dg_eta=gem_dg_gp.eta,
                    gem_pad_eta=gem_pad_gp.eta,
                    deta_sh=csc_sh_gp.eta - gem_sh_gp.eta,
                    deta_dg=csc_dg_gp.eta - gem_dg_gp.eta,
                    deta_pad=csc_dg_gp.eta - gem_pad_gp.eta,
                )

                # LCT quantities are only defined if the chamber has a valid LCT
                if lct_gp is not None and abs(lct_gp.z) > MIN_POSITION_Z:
                    rec.bend = int(LCT_BEND_PATTERN[lct.pattern])
                    rec.csc_lct_phi = lct_gp.phi
                    rec.dphi_lct_pad = delta_phi(lct_gp.phi, gem_pad_gp.phi)
                    rec.csc_lct_eta = lct_gp.eta
                    rec.deta_lct_pad = lct_gp.eta - gem_pad_gp.eta

                logger.debug("Matched CSC chamber %s with GEM %s.", csc_id, gem_id)
                records.append(rec)

        return records
