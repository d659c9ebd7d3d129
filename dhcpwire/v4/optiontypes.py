# SPDX-License-Identifier: MIT

from ..optiontypes import TypeRegistry

registry = TypeRegistry(256)

register = registry.register
unregister = registry.unregister
get = registry.get

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
