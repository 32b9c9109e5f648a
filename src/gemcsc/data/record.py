"""Module with the data class which holds the per-station matching record.

One record is produced per accepted truth track and per logical station. The
chamber-dependent quantities are duplicated into an odd-chamber slot and an
even-chamber slot, stored as 2-element arrays indexed by
:class:`gemcsc.utils.enums.Parity` and flattened into `<name>_odd` and
`<name>_even` columns when the record is stored.
"""

from dataclasses import dataclass

import numpy as np

from gemcsc.utils.enums import Parity

from .base import DataBase

__all__ = ["PerStationRecord"]


@dataclass(eq=False)
class PerStationRecord(DataBase):
    """Per-track, per-station matching record.

    Presence masks use bit 0 (value 1) for odd chambers and bit 1 (value 2)
    for even chambers. Every attribute starts from an out-of-range sentinel
    so that untouched slots are distinguishable from physical values.

    Attributes
    ----------
    lumi, run, event : int
        Event identifiers
    pt, eta, phi : float
        Truth track kinematics
    charge : int
        Truth track charge
    endcap : int
        Endcap of the track (+1 if eta > 0, -1 otherwise)
    chamber_ME1_csc_sh, chamber_ME2_csc_sh : int
        Parity mask of the station 1/2 CSC chambers with simulated hits
    chamber : np.ndarray
        (2) Chamber content mask (bit 0: GEM pad, bit 1: CSC LCT)
    quality : np.ndarray
        (2) LCT quality
    bending_sh : float
        Local bending of the CSC simulated hits
    phi_cscsh, eta_cscsh : np.ndarray
        (2) Key-layer position of the CSC simulated hits
    pt_sh, pteta_sh, ptphi_sh : float
        Mean momentum of the CSC simulated hits
    has_csc_sh, has_csc_strips, has_csc_wires : int
        Parity masks of chambers passing the simhit/strip/wire layer gates
    has_clct, has_alct, has_lct : int
        Parity masks of chambers with matched trigger primitives
    has_gem_sh, has_gem_sh2, has_gem_dg, has_gem_dg2 : int
        Parity masks of GEM superchambers with simulated hits and digis
    has_gem_pad, has_gem_pad2, has_gem_copad : int
        Parity masks of GEM superchambers with pads and copads
    has_rpc_sh, has_rpc_dg : int
        Parity masks of RPC rolls with simulated hits and digis
    """

    # Parity-duplicated attributes
    _parity_attrs = (
        ("chamber", (np.int64, 0)),
        ("quality", (np.int64, 0)),
        ("phi_cscsh", (np.float64, -9.0)),
        ("eta_cscsh", (np.float64, -9.0)),
        ("bend_lct", (np.int64, -9)),
        ("bx_lct", (np.int64, -9)),
        ("hs_lct", (np.float64, 0.0)),
        ("wg_lct", (np.float64, 0.0)),
        ("phi_lct", (np.float64, -9.0)),
        ("eta_lct", (np.float64, -9.0)),
        ("dphi_lct", (np.float64, -9.0)),
        ("passdphi", (bool, False)),
        ("wiregroup", (np.int64, -1)),
        ("halfstrip", (np.int64, -1)),
        ("quality_clct", (np.int64, -1)),
        ("quality_alct", (np.int64, -1)),
        ("nlayers_csc_sh", (np.int64, -1)),
        ("nlayers_wg_dg", (np.int64, -1)),
        ("nlayers_st_dg", (np.int64, -1)),
        ("pad", (np.int64, -1)),
        ("copad", (np.int64, -1)),
        ("hsfromgem", (np.int64, -1)),
        ("strip_gemsh", (np.float64, -9.0)),
        ("eta_gemsh", (np.float64, -9.0)),
        ("phi_gemsh", (np.float64, -9.0)),
        ("dphi_sh", (np.float64, -9.0)),
        ("strip_gemdg", (np.float64, -9.0)),
        ("strip_rpcdg", (np.int64, -1)),
        ("hsfromrpc", (np.int64, 0)),
        ("bx_pad", (np.int64, -9)),
        ("phi_pad", (np.float64, -9.0)),
        ("eta_pad", (np.float64, -9.0)),
        ("dphi_pad", (np.float64, -9.0)),
        ("deta_pad", (np.float64, -9.0)),
        ("bx_rpcstrip", (np.int64, -9)),
        ("phi_rpcstrip", (np.float64, -9.0)),
        ("eta_rpcstrip", (np.float64, -9.0)),
        ("dphi_rpcstrip", (np.float64, -9.0)),
        ("deta_rpcstrip", (np.float64, -9.0)),
    )

    # Historical column names
    _column_names = {
        ("copad", Parity.ODD): "Copad_odd",
        ("copad", Parity.EVEN): "copad_even",
    }

    # Boolean attributes
    _bool_attrs = (
        "hasME1",
        "hasME2",
        "passGE11",
        "passGE21",
        "passGE11_simpt",
        "passGE21_simpt",
        "allstubs_matched_TF",
        "hasSt1St2St3",
        "hasSt1St2St3_sh",
    )

    # Column order expected by the downstream readers
    _column_order = (
        "lumi",
        "run",
        "event",
        "pt",
        "eta",
        "phi",
        "charge",
        "endcap",
        "chamber_ME1_csc_sh",
        "chamber_ME2_csc_sh",
        "chamber_odd",
        "chamber_even",
        "quality_odd",
        "quality_even",
        "bending_sh",
        "phi_cscsh_even",
        "phi_cscsh_odd",
        "eta_cscsh_even",
        "eta_cscsh_odd",
        "pt_sh",
        "pteta_sh",
        "ptphi_sh",
        "has_csc_sh",
        "has_csc_strips",
        "has_csc_wires",
        "has_clct",
        "has_alct",
        "has_lct",
        "bend_lct_odd",
        "bend_lct_even",
        "bx_lct_odd",
        "bx_lct_even",
        "hs_lct_odd",
        "hs_lct_even",
        "wg_lct_even",
        "wg_lct_odd",
        "phi_lct_odd",
        "phi_lct_even",
        "eta_lct_odd",
        "eta_lct_even",
        "dphi_lct_odd",
        "dphi_lct_even",
        "passdphi_odd",
        "passdphi_even",
        "wiregroup_odd",
        "wiregroup_even",
        "halfstrip_odd",
        "halfstrip_even",
        "quality_clct_odd",
        "quality_clct_even",
        "quality_alct_odd",
        "quality_alct_even",
        "nlayers_csc_sh_odd",
        "nlayers_csc_sh_even",
        "nlayers_wg_dg_odd",
        "nlayers_wg_dg_even",
        "nlayers_st_dg_odd",
        "nlayers_st_dg_even",
        "pad_odd",
        "pad_even",
        "Copad_odd",
        "copad_even",
        "hsfromgem_odd",
        "hsfromgem_even",
        "has_gem_sh",
        "has_gem_sh2",
        "has_gem_dg",
        "has_gem_dg2",
        "has_gem_pad",
        "has_gem_pad2",
        "has_gem_copad",
        "strip_gemsh_odd",
        "strip_gemsh_even",
        "eta_gemsh_odd",
        "eta_gemsh_even",
        "phi_gemsh_odd",
        "phi_gemsh_even",
        "dphi_sh_odd",
        "dphi_sh_even",
        "strip_gemdg_odd",
        "strip_gemdg_even",
        "has_rpc_sh",
        "has_rpc_dg",
        "strip_rpcdg_odd",
        "strip_rpcdg_even",
        "hsfromrpc_odd",
        "hsfromrpc_even",
        "bx_pad_odd",
        "bx_pad_even",
        "phi_pad_odd",
        "phi_pad_even",
        "eta_pad_odd",
        "eta_pad_even",
        "dphi_pad_odd",
        "dphi_pad_even",
        "deta_pad_odd",
        "deta_pad_even",
        "bx_rpcstrip_odd",
        "bx_rpcstrip_even",
        "phi_rpcstrip_odd",
        "phi_rpcstrip_even",
        "eta_rpcstrip_odd",
        "eta_rpcstrip_even",
        "dphi_rpcstrip_odd",
        "dphi_rpcstrip_even",
        "deta_rpcstrip_odd",
        "deta_rpcstrip_even",
        "has_tfTrack",
        "has_tfCand",
        "has_gmtRegCand",
        "has_gmtCand",
        "trackpt",
        "tracketa",
        "trackphi",
        "quality_packed",
        "rank",
        "pt_packed",
        "eta_packed",
        "phi_packed",
        "chargesign",
        "deltaphi12",
        "deltaphi23",
        "hasME1",
        "hasME2",
        "ME1_ring",
        "ME2_ring",
        "chamberME1",
        "chamberME2",
        "ME1_hs",
        "ME1_wg",
        "ME2_hs",
        "ME2_wg",
        "dphiGE11",
        "dphiGE21",
        "passGE11",
        "passGE11_pt5",
        "passGE11_pt7",
        "passGE11_pt10",
        "passGE11_pt15",
        "passGE11_pt20",
        "passGE11_pt30",
        "passGE11_pt40",
        "passGE21",
        "passGE21_pt5",
        "passGE21_pt7",
        "passGE21_pt10",
        "passGE21_pt15",
        "passGE21_pt20",
        "passGE21_pt30",
        "passGE21_pt40",
        "passGE11_simpt",
        "passGE21_simpt",
        "nstubs",
        "deltaR",
        "lctdphi12",
        "eta_propagated_ME1",
        "eta_propagated_ME2",
        "eta_propagated_ME3",
        "eta_propagated_ME4",
        "phi_propagated_ME1",
        "phi_propagated_ME2",
        "phi_propagated_ME3",
        "phi_propagated_ME4",
        "eta_ME1_TF",
        "eta_ME2_TF",
        "eta_ME3_TF",
        "eta_ME4_TF",
        "phi_ME1_TF",
        "phi_ME2_TF",
        "phi_ME3_TF",
        "phi_ME4_TF",
        "eta_interStat12",
        "phi_interStat12",
        "eta_interStat23",
        "phi_interStat23",
        "eta_interStat13",
        "phi_interStat13",
        "allstubs_matched_TF",
        "has_l1Extra",
        "l1Extra_pt",
        "l1Extra_eta",
        "l1Extra_phi",
        "l1Extra_dR",
        "has_recoTrackExtra",
        "recoTrackExtra_pt_inner",
        "recoTrackExtra_eta_inner",
        "recoTrackExtra_phi_inner",
        "recoTrackExtra_pt_outer",
        "recoTrackExtra_eta_outer",
        "recoTrackExtra_phi_outer",
        "has_recoTrack",
        "recoTrack_pt_outer",
        "recoTrack_eta_outer",
        "recoTrack_phi_outer",
        "has_recoChargedCandidate",
        "recoChargedCandidate_pt",
        "recoChargedCandidate_eta",
        "recoChargedCandidate_phi",
        "recoChargedCandidate_nValidDTHits",
        "recoChargedCandidate_nValidCSCHits",
        "recoChargedCandidate_nValidRPCHits",
        "pt_position_sh",
        "pt_position",
        "pt_position2",
        "hasSt1St2St3",
        "hasSt1St2St3_sh",
    )

    # Event and truth track
    lumi: int = -99
    run: int = -99
    event: int = -99
    pt: float = 0.0
    eta: float = -9.0
    phi: float = 0.0
    charge: int = -9
    endcap: int = -9

    # CSC simulated hits
    chamber_ME1_csc_sh: int = 0
    chamber_ME2_csc_sh: int = 0
    chamber: np.ndarray = None
    quality: np.ndarray = None
    bending_sh: float = -10.0
    phi_cscsh: np.ndarray = None
    eta_cscsh: np.ndarray = None
    pt_sh: float = -9.0
    pteta_sh: float = 0.0
    ptphi_sh: float = -9.0

    # CSC presence masks
    has_csc_sh: int = 0
    has_csc_strips: int = 0
    has_csc_wires: int = 0
    has_clct: int = 0
    has_alct: int = 0
    has_lct: int = 0

    # CSC trigger primitives
    bend_lct: np.ndarray = None
    bx_lct: np.ndarray = None
    hs_lct: np.ndarray = None
    wg_lct: np.ndarray = None
    phi_lct: np.ndarray = None
    eta_lct: np.ndarray = None
    dphi_lct: np.ndarray = None
    passdphi: np.ndarray = None
    wiregroup: np.ndarray = None
    halfstrip: np.ndarray = None
    quality_clct: np.ndarray = None
    quality_alct: np.ndarray = None
    nlayers_csc_sh: np.ndarray = None
    nlayers_wg_dg: np.ndarray = None
    nlayers_st_dg: np.ndarray = None

    # GEM
    pad: np.ndarray = None
    copad: np.ndarray = None
    hsfromgem: np.ndarray = None
    has_gem_sh: int = 0
    has_gem_sh2: int = 0
    has_gem_dg: int = 0
    has_gem_dg2: int = 0
    has_gem_pad: int = 0
    has_gem_pad2: int = 0
    has_gem_copad: int = 0
    strip_gemsh: np.ndarray = None
    eta_gemsh: np.ndarray = None
    phi_gemsh: np.ndarray = None
    dphi_sh: np.ndarray = None
    strip_gemdg: np.ndarray = None

    # RPC
    has_rpc_sh: int = 0
    has_rpc_dg: int = 0
    strip_rpcdg: np.ndarray = None
    hsfromrpc: np.ndarray = None

    # Closest pad and RPC strip to the LCT
    bx_pad: np.ndarray = None
    phi_pad: np.ndarray = None
    eta_pad: np.ndarray = None
    dphi_pad: np.ndarray = None
    deta_pad: np.ndarray = None
    bx_rpcstrip: np.ndarray = None
    phi_rpcstrip: np.ndarray = None
    eta_rpcstrip: np.ndarray = None
    dphi_rpcstrip: np.ndarray = None
    deta_rpcstrip: np.ndarray = None

    # Track-finder track and candidates
    has_tfTrack: int = -99
    has_tfCand: int = -99
    has_gmtRegCand: int = -99
    has_gmtCand: int = -99
    trackpt: float = 0.0
    tracketa: float = 0.0
    trackphi: float = -9.0
    quality_packed: int = 0
    rank: int = 0
    pt_packed: int = 0
    eta_packed: int = 0
    phi_packed: int = 0
    chargesign: int = 99
    deltaphi12: int = 0
    deltaphi23: int = 0
    hasME1: bool = False
    hasME2: bool = False
    ME1_ring: int = -1
    ME2_ring: int = -1
    chamberME1: int = 0
    chamberME2: int = 0
    ME1_hs: int = -1
    ME1_wg: int = -1
    ME2_hs: int = -1
    ME2_wg: int = -1
    dphiGE11: float = -99.0
    dphiGE21: float = -99.0
    passGE11: bool = False
    passGE11_pt5: bool = False
    passGE11_pt7: bool = False
    passGE11_pt10: bool = False
    passGE11_pt15: bool = False
    passGE11_pt20: bool = False
    passGE11_pt30: bool = False
    passGE11_pt40: bool = False
    passGE21: bool = False
    passGE21_pt5: bool = False
    passGE21_pt7: bool = False
    passGE21_pt10: bool = False
    passGE21_pt15: bool = False
    passGE21_pt20: bool = False
    passGE21_pt30: bool = False
    passGE21_pt40: bool = False
    passGE11_simpt: bool = False
    passGE21_simpt: bool = False
    nstubs: int = 0
    deltaR: float = 10.0
    lctdphi12: float = -99.0

    # Propagation and track-finder stubs
    eta_propagated_ME1: float = -9.0
    eta_propagated_ME2: float = -9.0
    eta_propagated_ME3: float = -9.0
    eta_propagated_ME4: float = -9.0
    phi_propagated_ME1: float = -9.0
    phi_propagated_ME2: float = -9.0
    phi_propagated_ME3: float = -9.0
    phi_propagated_ME4: float = -9.0
    eta_ME1_TF: float = -9.0
    eta_ME2_TF: float = -9.0
    eta_ME3_TF: float = -9.0
    eta_ME4_TF: float = -9.0
    phi_ME1_TF: float = -9.0
    phi_ME2_TF: float = -9.0
    phi_ME3_TF: float = -9.0
    phi_ME4_TF: float = -9.0
    eta_interStat12: float = -9.0
    phi_interStat12: float = -9.0
    eta_interStat23: float = -9.0
    phi_interStat23: float = -9.0
    eta_interStat13: float = -9.0
    phi_interStat13: float = -9.0
    allstubs_matched_TF: bool = False

    # L1 and HLT objects
    has_l1Extra: int = 0
    l1Extra_pt: float = -99.0
    l1Extra_eta: float = -99.0
    l1Extra_phi: float = -99.0
    l1Extra_dR: float = -99.0
    has_recoTrackExtra: int = 0
    recoTrackExtra_pt_inner: float = -99.0
    recoTrackExtra_eta_inner: float = -99.0
    recoTrackExtra_phi_inner: float = -99.0
    recoTrackExtra_pt_outer: float = -99.0
    recoTrackExtra_eta_outer: float = -99.0
    recoTrackExtra_phi_outer: float = -99.0
    has_recoTrack: int = 0
    recoTrack_pt_outer: float = -99.0
    recoTrack_eta_outer: float = -99.0
    recoTrack_phi_outer: float = -99.0
    has_recoChargedCandidate: int = 0
    recoChargedCandidate_pt: float = -99.0
    recoChargedCandidate_eta: float = -99.0
    recoChargedCandidate_phi: float = -99.0
    recoChargedCandidate_nValidDTHits: int = 0
    recoChargedCandidate_nValidCSCHits: int = 0
    recoChargedCandidate_nValidRPCHits: int = 0

    # Position-based pT estimates
    pt_position_sh: float = -1.0
    pt_position: float = -1.0
    pt_position2: float = -1.0
    hasSt1St2St3: bool = False
    hasSt1St2St3_sh: bool = False

    def set_bit(self, attr, parity):
        """Sets the presence bit of a parity in a mask attribute.

        Parameters
        ----------
        attr : str
            Name of the mask attribute
        parity : Parity
            Parity slot
        """
        setattr(self, attr, getattr(self, attr) | parity.bit)

    def has_bit(self, attr, parity):
        """Checks the presence bit of a parity in a mask attribute.

        Parameters
        ----------
        attr : str
            Name of the mask attribute
        parity : Parity
            Parity slot

        Returns
        -------
        bool
            `True` if the bit is set
        """
        return bool(getattr(self, attr) & parity.bit)
