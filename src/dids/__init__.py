"""
┌──────────────────────────────┐
│      DID string parser       │
│                              │
│ - did:<method>:<id>          │
│ - ;params  #fragment         │
│ - parse / is_valid           │
└──────────────┬───────────────┘
               │
┌──────────────▼───────────────┐
│    DID Document parser       │
│                              │
│ - @context / subject         │
│ - created / updated          │
│ - publicKey                  │
│ - authentication             │
│ - service                    │
└──────────────┬───────────────┘
               │
┌──────────────▼───────────────┐
│   DID Document compiler      │
│                              │
│ - render (preferred order)   │
│ - JCS canonical digest       │
│ - JSON Schema check          │
└──────────────────────────────┘
"""
