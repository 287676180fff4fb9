# kvm_persistent_net/cli/__init__.py
