"""
PUDO Queries Module for PUDO Dimensions Backend.

Provides the Presto SQL templates behind the catalog:
- Active PUDO points (dimension table)
- Recent history: 28-day peak backlog volume and package size mix per point
- Live data: current backlog volume per point against its historical peak

All templates are static text built at import time from module constants.
None of them contain caller input or ``?`` placeholders; filter values are
bound by the compositor in filter_queries.

Business rules encoded here (do not change without the operations team):
- Backlog statuses are order_status IN (0, 2, 5)
- Local time is America/Sao_Paulo
- Volumes are in cm³ and reported in m³ (/ 1000000)
- Package size thresholds: weight in kg, volume in cm³
"""

from pudo_dimensions.models.enums import PackageSize


# =============================================================================
# CONSTANTS
# =============================================================================

# Source tables
PUDOS_ACTIVE_TABLE: str = "dev_brbi_opslgc.pudos_active_br_us_v1"
SHIPMENTS_TABLE: str = "dev_brbi_opslgc.ads_pudo_shipments_inbounded_asm_dimensions__br_daily"

# Rolling window for the recent history query
RECENT_HISTORY_WINDOW_DAYS: int = 28

LOCAL_TIMEZONE: str = "America/Sao_Paulo"

# Order statuses meaning the shipment is still waiting at the point
BACKLOG_ORDER_STATUSES: str = "(0, 2, 5)"

# Shared key between metric queries and the dimension table
DOP_ID_COLUMN: str = "dop_id"


# =============================================================================
# SHARED FRAGMENTS
# =============================================================================

# Shipment cube in cm³: ASM measurement first, then manual dims and the ASM mean
SHIPMENT_VOLUME_EXPR: str = """COALESCE(shipment_cube_asm, (
          CASE
            WHEN shipment_cube_based_on_manual_dims = 0 THEN shipment_cube_based_on_mean_asm
            WHEN shipment_cube_based_on_mean_asm IS NULL THEN shipment_cube_based_on_manual_dims
            ELSE CAST(CAST(shipment_cube_based_on_mean_asm + shipment_cube_based_on_manual_dims AS double) / 2 AS int)
          END
        ))"""

# Integer division in (200/3) is intentional; Presto evaluates it to 66
SIZE_CLASSIFICATION_EXPR: str = f"""CASE
          WHEN shipment_weight > 30 THEN '{PackageSize.GG.value}'
          WHEN shipment_weight >= 10 AND shipment_weight <= 30 THEN '{PackageSize.G.value}'
          WHEN shipment_volume < 15*15*5 THEN '{PackageSize.P.value}'
          WHEN shipment_volume > (200/3) * (200/3) * (200/3) THEN '{PackageSize.GG.value}'
          WHEN shipment_volume > 40*40*25 THEN '{PackageSize.G.value}'
          ELSE '{PackageSize.M.value}'
        END"""

_LOCAL_NOW: str = f"current_timestamp AT TIME ZONE '{LOCAL_TIMEZONE}'"


# =============================================================================
# ACTIVE POINTS QUERY
# =============================================================================

PUDOS_ATIVOS_QUERY: str = f"""
    SELECT dop_id, estado, cidade
    FROM {PUDOS_ACTIVE_TABLE}
"""

PUDOS_ATIVOS_COLUMNS = ("dop_id", "estado", "cidade")


# =============================================================================
# RECENT HISTORY QUERY
# =============================================================================

RECENT_HISTORY_QUERY: str = f"""
    WITH shipments AS (
      SELECT shipment_id,
        dop_id,
        inbound_time,
        CASE
          WHEN (order_status IN {BACKLOG_ORDER_STATUSES} AND inbound_time > outbound_time)
          THEN CAST({_LOCAL_NOW} AS timestamp)
          ELSE outbound_time
        END AS outbound_time,
        {SHIPMENT_VOLUME_EXPR} AS shipment_volume,
        shipment_weight
      FROM {SHIPMENTS_TABLE}
      WHERE (outbound_time >= inbound_time OR (order_status IN {BACKLOG_ORDER_STATUSES}))
      AND DATE(inbound_time) BETWEEN DATE({_LOCAL_NOW}) - INTERVAL '{RECENT_HISTORY_WINDOW_DAYS}' DAY AND DATE({_LOCAL_NOW})
    ),
    events AS (
      SELECT dop_id,
        inbound_time AS event_time,
        shipment_volume AS volume_change
      FROM shipments
      UNION ALL
      SELECT dop_id,
        outbound_time AS event_time,
        -shipment_volume AS volume_change
      FROM shipments
    ),
    cumulative_volume AS (
      SELECT dop_id,
        event_time,
        volume_change,
        SUM(volume_change) OVER (PARTITION BY dop_id ORDER BY event_time) AS cumulative_volume
      FROM events
    ),
    max_volume AS (
      SELECT dop_id,
        event_time AS max_event_time,
        cumulative_volume AS max_cumulative_volume,
        ROW_NUMBER() OVER (PARTITION BY dop_id ORDER BY cumulative_volume DESC, event_time DESC) AS rn
      FROM cumulative_volume
    ),
    classified_shipments AS (
      SELECT dop_id,
        {SIZE_CLASSIFICATION_EXPR} AS size
      FROM shipments
    ),
    package_counts AS (
      SELECT
        dop_id,
        COUNT(CASE WHEN size = 'P' THEN 1 END) AS count_P,
        COUNT(CASE WHEN size = 'M' THEN 1 END) AS count_M,
        COUNT(CASE WHEN size = 'G' THEN 1 END) AS count_G,
        COUNT(CASE WHEN size = 'GG' THEN 1 END) AS count_GG,
        COUNT(*) AS total_count
      FROM
        classified_shipments
      GROUP BY
        dop_id
    )
    SELECT mv.dop_id,
      mv.max_event_time,
      CAST(mv.max_cumulative_volume AS double) / 1000000 AS max_cumulative_volume,
      COALESCE(pc.count_P, 0) AS count_p,
      COALESCE(pc.count_M, 0) AS count_m,
      COALESCE(pc.count_G, 0) AS count_g,
      COALESCE(pc.count_GG, 0) AS count_gg,
      COALESCE(pc.total_count, 0) AS total_count
    FROM max_volume mv
    LEFT JOIN package_counts pc ON mv.dop_id = pc.dop_id
    WHERE mv.rn = 1
"""

RECENT_HISTORY_COLUMNS = (
    "dop_id",
    "max_event_time",
    "max_cumulative_volume",
    "count_p",
    "count_m",
    "count_g",
    "count_gg",
    "total_count",
)


# =============================================================================
# LIVE DATA QUERY
# =============================================================================

LIVE_DATA_QUERY: str = f"""
    WITH
    shipments_in_backlog AS (
      SELECT
        shipment_id,
        shopee_order_sn,
        dop_id,
        shop_id,
        seller_id,
        inbound_time,
        CAST({SHIPMENT_VOLUME_EXPR} AS double)/1000000 AS shipment_volume,
        shipment_weight,
        qty_items,
        item_names
      FROM {SHIPMENTS_TABLE}
      WHERE outbound_time < inbound_time
      AND order_status IN {BACKLOG_ORDER_STATUSES}
    ),
    current_volume AS (
      SELECT
        dop_id,
        COUNT(DISTINCT shipment_id) AS n_shipments,
        SUM(shipment_volume) AS current_cumulative_volume
      FROM
        shipments_in_backlog
      GROUP BY
        dop_id
    ),
    max_volume_hist AS (
      WITH events AS (
        SELECT dop_id,
          inbound_time AS event_time,
          shipment_volume AS volume_change
        FROM {SHIPMENTS_TABLE}
        UNION ALL
        SELECT dop_id,
          outbound_time AS event_time,
          -shipment_volume AS volume_change
        FROM {SHIPMENTS_TABLE}
      ),
      cumulative_volume AS (
        SELECT dop_id,
          event_time,
          volume_change,
          SUM(volume_change) OVER (PARTITION BY dop_id ORDER BY event_time) AS cumulative_volume
        FROM events
      )
      SELECT dop_id,
        MAX(cumulative_volume) AS max_cumulative_volume
      FROM cumulative_volume
      GROUP BY dop_id
    )
    SELECT
      cv.dop_id,
      mv.max_cumulative_volume,
      cv.n_shipments,
      cv.current_cumulative_volume
    FROM current_volume cv
    LEFT JOIN max_volume_hist mv ON cv.dop_id = mv.dop_id
"""

LIVE_DATA_COLUMNS = (
    "dop_id",
    "max_cumulative_volume",
    "n_shipments",
    "current_cumulative_volume",
)
