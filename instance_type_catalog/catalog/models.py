"""Instance type descriptor returned by the compute catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class InstanceTypeInfo:
    """A single instance type offered by the cloud provider."""

    instance_type: str
    current_generation: bool = False
    bare_metal: bool = False
    hypervisor: str | None = None  # "nitro", "xen", or None for metal
    vcpus: int | None = None
    memory_mib: int | None = None
    architectures: tuple[str, ...] = ()
    virtualization_types: tuple[str, ...] = ()
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> InstanceTypeInfo:
        """Build from one entry of a DescribeInstanceTypes ``InstanceTypes`` list.

        Raises KeyError when ``InstanceType`` is absent.
        """
        vcpu_info = raw.get("VCpuInfo", {})
        memory_info = raw.get("MemoryInfo", {})
        processor_info = raw.get("ProcessorInfo", {})
        return cls(
            instance_type=raw["InstanceType"],
            current_generation=bool(raw.get("CurrentGeneration", False)),
            bare_metal=bool(raw.get("BareMetal", False)),
            hypervisor=raw.get("Hypervisor"),
            vcpus=vcpu_info.get("DefaultVCpus"),
            memory_mib=memory_info.get("SizeInMiB"),
            architectures=tuple(processor_info.get("SupportedArchitectures", [])),
            virtualization_types=tuple(raw.get("SupportedVirtualizationTypes", [])),
            raw=raw,
        )
