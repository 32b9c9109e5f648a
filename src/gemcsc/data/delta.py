"""Module with the data class which holds a track/chamber delta record."""

from dataclasses import dataclass

from gemcsc.utils.globals import DELTA_DEFAULT

from .base import DataBase

__all__ = ["TrackChamberDeltaRecord"]


@dataclass(eq=False)
class TrackChamberDeltaRecord(DataBase):
    """Differences between the CSC and GEM responses of one truth track.

    One record is produced for each (CSC chamber, GEM superchamber) pair of
    the same region and chamber number. Positions are compared at the level
    of simulated hits (`sh`), digis (`dg`), pads (`pad`) and LCTs (`lct`).
    The LCT quantities keep their default value unless a valid LCT exists in
    the CSC chamber. The last four attributes are reserved.

    Attributes
    ----------
    odd : int
        1 if the CSC chamber is odd, 0 otherwise
    charge : int
        Truth track charge
    chamber : int
        CSC chamber number
    endcap : int
        CSC endcap
    roll : int
        Roll of the closest GEM pad
    bend : int
        LCT bend code
    pt, eta, phi : float
        Truth track kinematics
    """

    odd: int = DELTA_DEFAULT
    charge: int = DELTA_DEFAULT
    chamber: int = DELTA_DEFAULT
    endcap: int = DELTA_DEFAULT
    roll: int = DELTA_DEFAULT
    bend: int = DELTA_DEFAULT
    pt: float = DELTA_DEFAULT
    eta: float = DELTA_DEFAULT
    phi: float = DELTA_DEFAULT
    csc_sh_phi: float = DELTA_DEFAULT
    csc_dg_phi: float = DELTA_DEFAULT
    gem_sh_phi: float = DELTA_DEFAULT
    gem_dg_phi: float = DELTA_DEFAULT
    gem_pad_phi: float = DELTA_DEFAULT
    dphi_sh: float = DELTA_DEFAULT
    dphi_dg: float = DELTA_DEFAULT
    dphi_pad: float = DELTA_DEFAULT
    csc_sh_eta: float = DELTA_DEFAULT
    csc_dg_eta: float = DELTA_DEFAULT
    gem_sh_eta: float = DELTA_DEFAULT
    gem_dg_eta: float = DELTA_DEFAULT
    gem_pad_eta: float = DELTA_DEFAULT
    deta_sh: float = DELTA_DEFAULT
    deta_dg: float = DELTA_DEFAULT
    deta_pad: float = DELTA_DEFAULT
    csc_lct_phi: float = DELTA_DEFAULT
    dphi_lct_pad: float = DELTA_DEFAULT
    csc_lct_eta: float = DELTA_DEFAULT
    deta_lct_pad: float = DELTA_DEFAULT
    dphi_gem_sh_csc_sh: float = DELTA_DEFAULT
    dphi_gem_dg_csc_dg: float = DELTA_DEFAULT
    dphi_gem_pad_csc_lct: float = DELTA_DEFAULT
    dphi_gem_rh_csc_seg: float = DELTA_DEFAULT
