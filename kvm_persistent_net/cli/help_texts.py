# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/cli/help_texts.py
from __future__ import annotations

# NOTE:
# Pure help/documentation text used by argparse epilog rendering.
# Keep it "copy/paste runnable" and avoid importing anything here.

EXAMPLES = r"""  kvm-vm-persistent-net centos7-vm
  kvm-vm-persistent-net --prefix enp centos7-vm
  kvm-vm-persistent-net --start-index 1 ubuntu-vm
  kvm-vm-persistent-net --dry-run debian-vm
  kvm-vm-persistent-net --config naming.yaml --dry-run centos7-vm
"""

YAML_EXAMPLE = r"""# kvm-vm-persistent-net configuration (YAML)
#
# Merge multiple configs (later overrides earlier, CLI flags override both):
#   kvm-vm-persistent-net --config base.yaml --config site.yaml <vm-name>
#
prefix: enp
start_index: 1
rule_name: 70-persistent-net.rules
dry_run: false
use_sudo: true   # prefix virsh / virt-copy-in with sudo
timeout: 120     # seconds per tool invocation (omit to wait forever)
"""

NOTES = r"""The VM must be shut off: the rules file is copied into its disk image with
virt-copy-in and lands in /etc/udev/rules.d/ (an existing file of the same name
is overwritten). Interfaces are numbered in the order they appear in
`virsh dumpxml`.
"""
