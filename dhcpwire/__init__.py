"""dhcpwire

DHCP message representation and exchange rules

"""

__author__ = 'Tori Wolf <wiredwolf@wiredwolf.gg>'
__version__ = '0.1.0'
__date__ = '2023-09-07'
# SPDX-License-Identifier: MIT
__license__ = 'MIT'
__copyright__ = '2023 Tori Wolf'

from . import v4 as ipv4
from .error import Error, DHCPv4Error

__all__ = ['ipv4', 'Error', 'DHCPv4Error']

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
