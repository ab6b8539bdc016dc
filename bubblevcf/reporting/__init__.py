from .vcf import VCFHeader, VCFRecord, VCFWriter, records_from_aggregate

__all__ = ['VCFHeader', 'VCFRecord', 'VCFWriter', 'records_from_aggregate']
