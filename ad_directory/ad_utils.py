from __future__ import annotations


def domain_to_base_dn(domain: str) -> str:
    domain = (domain or "").strip().strip(".")
    if not domain or "." not in domain:
        return ""
    parts = [p for p in domain.split(".") if p]
    return ",".join([f"DC={p}" for p in parts])


def child_dn(rdn: str, parent: str) -> str:
    """Join an RDN onto a parent DN; an empty parent yields the RDN alone."""
    rdn = (rdn or "").strip()
    parent = (parent or "").strip().strip(",")
    return f"{rdn},{parent}" if parent else rdn
