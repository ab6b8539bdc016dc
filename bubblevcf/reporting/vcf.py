"""
VCF output for aggregated bubble variants.

Records carry no genotype evidence, so FORMAT and SAMPLE are the fixed
placeholder `GT` / `0|1`, and unset columns print as '.'.
"""
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, TextIO

from bubblevcf import __version__
from bubblevcf.variation.aggregator import VariantAggregator

logger = logging.getLogger(__name__)

VCF_COLUMNS = ["CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT", "SAMPLE"]


def _display_field(value: Any) -> str:
    return "." if value is None else str(value)


@dataclass
class VCFRecord:
    """One VCF data line."""
    chromosome: str
    position: int
    reference: str
    id: Optional[str] = None
    alternate: Optional[str] = None
    quality: Optional[int] = None
    filter: Optional[str] = None
    info: Optional[str] = None
    format: Optional[str] = "GT"
    sample_name: Optional[str] = "0|1"

    def sort_key(self):
        return (self.chromosome.encode('utf-8'), self.position)

    def to_line(self) -> str:
        fields = [
            self.chromosome,
            self.position,
            self.id,
            self.reference,
            self.alternate,
            self.quality,
            self.filter,
            self.info,
            self.format,
            self.sample_name,
        ]
        return "\t".join(_display_field(f) for f in fields)

    def __str__(self) -> str:
        return self.to_line()


def records_from_aggregate(aggregator: VariantAggregator) -> List[VCFRecord]:
    """
    Turn the aggregated map into sorted VCF records.

    Order is by contig name (byte order), then position; python's sort is
    stable, so the aggregator's REF order breaks remaining ties.
    """
    records = []
    for key, variants in aggregator.items():
        records.append(VCFRecord(
            chromosome=key.contig,
            position=key.position,
            reference=key.reference,
            alternate=",".join(v.alternate for v in variants),
            info=";".join(f"TYPE={v.variant_type.value}" for v in variants),
        ))
    records.sort(key=VCFRecord.sort_key)
    return records


class VCFHeader:
    """Header block naming the source graph and the reference contigs."""

    def __init__(self, source_graph: str, contigs: Optional[Dict[str, int]] = None,
                 file_date: Optional[datetime] = None):
        self.source_graph = source_graph
        self.contigs = contigs or {}
        self.file_date = file_date or datetime.now()

    def lines(self) -> List[str]:
        lines = [
            "##fileformat=VCFv4.2",
            f"##fileDate={self.file_date.strftime('%Y%m%d')}",
            f"##source=bubblevcf-{__version__}",
            f"##reference={os.path.basename(str(self.source_graph))}",
        ]
        for name in sorted(self.contigs, key=lambda n: n.encode('utf-8')):
            lines.append(f"##contig=<ID={name},length={self.contigs[name]}>")
        lines.extend([
            '##INFO=<ID=TYPE,Number=A,Type=String,Description="Type of each allele (snv, ins, del)">',
            '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
            "#" + "\t".join(VCF_COLUMNS),
        ])
        return lines

    def __str__(self) -> str:
        return "\n".join(self.lines())


class VCFWriter:
    """Writes a header once followed by records."""

    def __init__(self, header: VCFHeader):
        self.header = header

    def write(self, records: Iterable[VCFRecord], handle: TextIO) -> int:
        handle.write(str(self.header) + "\n")
        count = 0
        for record in records:
            handle.write(record.to_line() + "\n")
            count += 1
        return count

    def write_file(self, records: Iterable[VCFRecord], output_file: str) -> str:
        """
        Write the VCF to a file.

        Args:
            records: Sorted records
            output_file: Path to output file

        Returns:
            Path to the generated file
        """
        os.makedirs(os.path.dirname(os.path.abspath(output_file)), exist_ok=True)
        with open(output_file, 'w') as f:
            count = self.write(records, f)
        logger.info(f"Wrote {count} VCF records to {output_file}")
        return output_file
