"""
GeoSPARQL vocabulary and feature schema names.
"""

from rdf_geoindex.terms import IRI

NS_GEO = "http://www.opengis.net/ont/geosparql#"
NS_GEOF = "http://www.opengis.net/def/function/geosparql/"

XMLSCHEMA_OGC_WKT = IRI(NS_GEO + "wktLiteral")
GEO_AS_WKT = IRI(NS_GEO + "asWKT")

GEO_SF_EQUALS = IRI(NS_GEOF + "sfEquals")
GEO_SF_DISJOINT = IRI(NS_GEOF + "sfDisjoint")
GEO_SF_INTERSECTS = IRI(NS_GEOF + "sfIntersects")
GEO_SF_TOUCHES = IRI(NS_GEOF + "sfTouches")
GEO_SF_CROSSES = IRI(NS_GEOF + "sfCrosses")
GEO_SF_WITHIN = IRI(NS_GEOF + "sfWithin")
GEO_SF_CONTAINS = IRI(NS_GEOF + "sfContains")
GEO_SF_OVERLAPS = IRI(NS_GEOF + "sfOverlaps")

# Backend feature type
FEATURE_NAME = "RDF"

SUBJECT_ATTRIBUTE = "S"
PREDICATE_ATTRIBUTE = "P"
OBJECT_ATTRIBUTE = "O"
CONTEXT_ATTRIBUTE = "C"
GEOMETRY_ATTRIBUTE = "geom"

CRS = "EPSG:4326"
SRID = 4326

FEATURE_SCHEMA = (
    f"{SUBJECT_ATTRIBUTE}:String,"
    f"{PREDICATE_ATTRIBUTE}:String,"
    f"{OBJECT_ATTRIBUTE}:String,"
    f"{CONTEXT_ATTRIBUTE}:String,"
    f"{GEOMETRY_ATTRIBUTE}:Geometry:srid={SRID}"
)
