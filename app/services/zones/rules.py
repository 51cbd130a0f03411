"""Hand-maintained address vocabulary for zone detection."""

# Shorthand customers type in addresses, expanded token by token.
SHORTHAND_EXPANSIONS = {
    "wbm": "wisata bukit mas",
    "vbm": "villa bukit mas",
    "vbr": "villa bukit regency",
    "pc": "pakuwon city",
    "gp": "grand pakuwon",
    "gf": "graha famili",
    "gn": "graha natura",
    "dhi": "darmo harapan indah",
    "kj": "kertajaya",
    "kir": "kertajaya indah regency",
    "gbp": "galaxy bumi permai",
    "cl": "citraland",
    "ecr": "east coast residence",
    "rr": "royal residence",
}

# Street-address noise dropped before matching.
ADDRESS_STOPWORDS = frozenset(
    [
        "jl", "jln", "jalan", "blok", "blk", "rt", "rw", "no", "nomor", "nmr",
        "kec", "kecamatan", "kel", "kelurahan", "kab", "kabupaten", "kota",
        "gg", "gang", "perum", "perumahan", "komplek", "kompleks",
    ]
)

# Extra keywords per zone code, on top of name, area group and code.
ZONE_ALIASES = {
    "GRAHA_FAMILI": ["graha family", "grafam", "graha famili"],
    "WISATA_BUKIT_MAS": ["wisata bukit mas", "bukit mas"],
    "VILLA_BUKIT_MAS": ["villa bukit mas", "vila bukit mas"],
    "GRAND_PAKUWON": ["grand pakuwon"],
    "PAKUWON_CITY": ["pakuwon city", "pakuwon indah", "san antonio"],
    "DARMO_HARAPAN_INDAH": ["darmo harapan", "darmo harapan indah"],
    "KERTAJAYA_INDAH": ["kertajaya indah", "kertajaya"],
    "GALAXY_BUMI_PERMAI": ["galaxy bumi permai", "galaxy"],
    "DIAN_ISTANA": ["dian istana"],
    "ROYAL_RESIDENCE": ["royal residence"],
}

# Last resort when no zone keyword clears the similarity threshold.
# Plain substring match on the normalized address, first rule wins.
STATIC_ZONE_RULES = [
    ("GRAHA_FAMILI", ["graha fam", "grafam"]),
    ("WISATA_BUKIT_MAS", ["bukit mas"]),
    ("PAKUWON_CITY", ["pakuwon city", "laguna", "san diego", "san antonio"]),
    ("GRAND_PAKUWON", ["grand pakuwon"]),
    ("DARMO_AREA", ["darmo", "dr soetomo", "diponegoro"]),
    ("GUBENG_AREA", ["gubeng", "dharmawangsa", "airlangga"]),
    ("MARGOREJO_AREA", ["margorejo", "wonocolo"]),
    ("JEMURSARI_AREA", ["jemursari", "jemur"]),
    ("KETINTANG_AREA", ["ketintang", "gayungan"]),
    ("MULYOSARI_AREA", ["mulyosari", "mulyorejo", "sutorejo"]),
    ("MANYAR_AREA", ["manyar", "nginden"]),
]
