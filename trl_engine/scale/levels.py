"""
NASA TRL Reference Table
trl_engine/scale/levels.py

Generic (domain-independent) definitions for all 27 positions on the TRL
scale, following NASA NPR 7123.1C. Domain-specific evidence and exit
criteria are supplied separately by a DomainDataProvider and appended to
these lists.

Each sub-level row:
  name, description,
  evidence  [(type, description, required), ...],
  exit criteria [...],
  typical duration (min, max) in months
"""

from typing import Dict, List, Tuple

from trl_engine.models.definitions import LevelDefinition, SublevelDefinition, TypicalDuration
from trl_engine.models.enumerations import EvidenceType, Sublevel, TRLPhase
from trl_engine.models.evidence import EvidenceRequirement

_Row = Tuple[str, str, List[Tuple[str, str, bool]], List[str], Tuple[int, int]]


# ---------------------------------------------------------------------------
# Raw table
# ---------------------------------------------------------------------------

_TRL_TABLE: Dict[int, Tuple[str, str, TRLPhase, Tuple[_Row, _Row, _Row]]] = {
    1: (
        "Basic Principles Observed",
        "Scientific research begins to be translated into applied R&D.",
        TRLPhase.RESEARCH,
        (
            ("Scientific literature review initiated",
             "Initial observation of basic principles documented in scientific literature.",
             [("document", "Literature review summary", True),
              ("document", "Relevant prior art identification", True)],
             ["Literature review completed",
              "Basic scientific principles identified",
              "Initial hypothesis formulated"],
             (1, 3)),
            ("Basic principles under investigation",
             "Active investigation of fundamental physical principles.",
             [("document", "Theoretical analysis report", True),
              ("data", "Initial experimental observations", False)],
             ["Physical principles documented",
              "Initial theoretical models developed",
              "Potential applications identified"],
             (2, 6)),
            ("Basic principles validated",
             "Fundamental principles have been validated through initial experiments.",
             [("document", "Validation experiment report", True),
              ("data", "Experimental data supporting principles", True),
              ("publication", "Peer-reviewed publication", False)],
             ["Experimental validation completed",
              "Principles confirmed to be sound",
              "Ready for technology concept formulation"],
             (3, 9)),
        ),
    ),
    2: (
        "Technology Concept Formulated",
        "Practical applications of basic principles invented.",
        TRLPhase.RESEARCH,
        (
            ("Concept exploration initiated",
             "Application concepts being explored and documented.",
             [("document", "Concept exploration report", True),
              ("document", "Application feasibility notes", True)],
             ["Multiple concepts identified",
              "Initial feasibility assessed",
              "Target applications defined"],
             (2, 4)),
            ("Technology concept defined",
             "Specific technology concept has been defined and documented.",
             [("document", "Technology concept document", True),
              ("document", "Preliminary system requirements", True),
              ("document", "Initial patent search", False)],
             ["Concept architecture defined",
              "System requirements documented",
              "Key performance parameters identified"],
             (3, 6)),
            ("Technology concept validated",
             "Concept has been validated through analysis or limited experimentation.",
             [("document", "Concept validation report", True),
              ("data", "Analytical model results", True),
              ("document", "Risk assessment", True)],
             ["Concept analytically validated",
              "Key risks identified and assessed",
              "Ready for proof of concept"],
             (3, 9)),
        ),
    ),
    3: (
        "Proof of Concept",
        "Active research and development initiated with analytical and laboratory studies.",
        TRLPhase.RESEARCH,
        (
            ("Critical function identification",
             "Critical functions and components identified for PoC development.",
             [("document", "Critical function analysis", True),
              ("document", "PoC development plan", True)],
             ["Critical functions identified",
              "Development plan approved",
              "Resources allocated"],
             (2, 4)),
            ("Laboratory experiments in progress",
             "Active laboratory-scale experiments validating concept.",
             [("data", "Laboratory test data", True),
              ("document", "Experiment protocols", True),
              ("document", "Progress reports", True)],
             ["Laboratory setup complete",
              "Initial experiments conducted",
              "Data collection ongoing"],
             (4, 12)),
            ("Proof of concept validated",
             "Proof of concept experiments completed with positive results.",
             [("data", "Complete PoC test data", True),
              ("document", "PoC validation report", True),
              ("document", "Lessons learned document", True),
              ("publication", "Technical publication", False)],
             ["PoC objectives met",
              "Performance within expected range",
              "Ready for component development"],
             (6, 18)),
        ),
    ),
    4: (
        "Component Validation in Lab",
        "Basic technological components integrated and tested in laboratory environment.",
        TRLPhase.DEVELOPMENT,
        (
            ("Component development initiated",
             "Key components being developed based on PoC results.",
             [("document", "Component specifications", True),
              ("document", "Development schedule", True),
              ("document", "Test plan", True)],
             ["Component specs finalized",
              "Development schedule approved",
              "Test infrastructure ready"],
             (3, 6)),
            ("Component testing in progress",
             "Components undergoing laboratory testing.",
             [("data", "Component test data", True),
              ("document", "Test procedures", True),
              ("document", "Anomaly reports", False)],
             ["Testing underway per plan",
              "Data being collected",
              "Issues being tracked"],
             (6, 12)),
            ("Component validation complete",
             "Components validated in laboratory environment.",
             [("data", "Complete component test data", True),
              ("document", "Validation report", True),
              ("document", "Interface specifications", True)],
             ["All components validated",
              "Performance requirements met",
              "Ready for subsystem integration"],
             (6, 18)),
        ),
    ),
    5: (
        "Component Validation in Relevant Environment",
        "Basic components integrated and tested in simulated operational environment.",
        TRLPhase.DEVELOPMENT,
        (
            ("Relevant environment defined",
             "Simulated operational environment specifications defined.",
             [("document", "Environment specification", True),
              ("document", "Test facility requirements", True)],
             ["Environment specs finalized",
              "Test facility identified",
              "Integration plan complete"],
             (2, 4)),
            ("Subsystem testing in progress",
             "Integrated subsystems under test in relevant environment.",
             [("data", "Subsystem test data", True),
              ("document", "Test procedures", True),
              ("document", "Integration logs", True)],
             ["Subsystems integrated",
              "Testing in progress",
              "Performance data collected"],
             (6, 12)),
            ("Subsystem validation complete",
             "Subsystems validated in simulated operational environment.",
             [("data", "Complete subsystem test data", True),
              ("document", "Validation report", True),
              ("document", "System interface document", True)],
             ["Subsystems validated",
              "Performance verified",
              "Ready for system integration"],
             (6, 18)),
        ),
    ),
    6: (
        "System Demonstration in Relevant Environment",
        "Representative model or prototype demonstrated in relevant environment.",
        TRLPhase.DEMONSTRATION,
        (
            ("Prototype development initiated",
             "Engineering development model or prototype construction started.",
             [("document", "Prototype design", True),
              ("document", "Manufacturing plan", True),
              ("document", "Demonstration plan", True)],
             ["Design finalized",
              "Manufacturing started",
              "Demonstration plan approved"],
             (4, 8)),
            ("Prototype demonstration in progress",
             "Prototype undergoing demonstration in relevant environment.",
             [("data", "Demonstration test data", True),
              ("document", "Test procedures", True),
              ("video", "Demonstration video", False)],
             ["Prototype complete",
              "Demonstration underway",
              "Stakeholder reviews conducted"],
             (6, 12)),
            ("System demonstration complete",
             "System successfully demonstrated in relevant environment.",
             [("data", "Complete demonstration data", True),
              ("document", "Demonstration report", True),
              ("document", "Performance assessment", True)],
             ["Demonstration objectives met",
              "Performance verified",
              "Ready for operational demonstration"],
             (6, 18)),
        ),
    ),
    7: (
        "System Demonstration in Operational Environment",
        "Prototype demonstrated in actual operational environment.",
        TRLPhase.DEMONSTRATION,
        (
            ("Operational demonstration planned",
             "Operational demonstration planning and site preparation.",
             [("document", "Operational demo plan", True),
              ("document", "Site preparation checklist", True),
              ("document", "Safety analysis", True)],
             ["Demo plan approved",
              "Site prepared",
              "Safety review complete"],
             (3, 6)),
            ("Operational demonstration in progress",
             "System undergoing demonstration in operational environment.",
             [("data", "Operational test data", True),
              ("document", "Daily operations logs", True),
              ("document", "Incident reports", False)],
             ["System deployed to operational site",
              "Demonstration in progress",
              "Data being collected"],
             (6, 18)),
            ("Operational demonstration complete",
             "System successfully demonstrated in operational environment.",
             [("data", "Complete operational data", True),
              ("document", "Operational demo report", True),
              ("document", "Readiness assessment", True)],
             ["All demo objectives met",
              "Operational performance verified",
              "Ready for qualification"],
             (6, 24)),
        ),
    ),
    8: (
        "System Complete and Qualified",
        "Technology proven to work in final form under expected conditions.",
        TRLPhase.DEPLOYMENT,
        (
            ("Qualification testing initiated",
             "Final form system undergoing qualification testing.",
             [("document", "Qualification test plan", True),
              ("document", "Quality assurance plan", True),
              ("document", "Certification requirements", True)],
             ["Test plan approved",
              "QA procedures in place",
              "Certification path defined"],
             (3, 6)),
            ("Qualification testing in progress",
             "System undergoing comprehensive qualification testing.",
             [("data", "Qualification test data", True),
              ("document", "Test procedures", True),
              ("document", "Non-conformance reports", False)],
             ["Testing per plan",
              "Data collected and analyzed",
              "Issues resolved"],
             (6, 12)),
            ("System qualified",
             "System qualified through test and demonstration.",
             [("document", "Qualification report", True),
              ("document", "Certification documentation", True),
              ("document", "Production readiness review", True)],
             ["Qualification complete",
              "Certifications obtained",
              "Ready for deployment"],
             (6, 18)),
        ),
    ),
    9: (
        "System Proven in Operational Environment",
        "Actual system proven through successful mission operations.",
        TRLPhase.DEPLOYMENT,
        (
            ("Initial operational capability",
             "System achieving initial operational capability.",
             [("document", "IOC declaration", True),
              ("data", "Initial operations data", True),
              ("document", "O&M procedures", True)],
             ["System deployed",
              "Initial operations successful",
              "O&M procedures validated"],
             (3, 6)),
            ("Full operational capability",
             "System at full operational capability with sustained operations.",
             [("data", "Operational performance data", True),
              ("document", "Performance reports", True),
              ("document", "Reliability data", True)],
             ["Full capability achieved",
              "Performance targets met",
              "Reliability demonstrated"],
             (6, 12)),
            ("Proven system",
             "System proven through extensive successful operations.",
             [("data", "Extensive operational data", True),
              ("document", "Long-term performance report", True),
              ("document", "Lessons learned", True),
              ("document", "Technology transfer documentation", False)],
             ["Extensive operational history",
              "Technology mature and stable",
              "Ready for technology transfer"],
             (12, 36)),
        ),
    ),
}


# ---------------------------------------------------------------------------
# Typed definitions
# ---------------------------------------------------------------------------

def _build_sublevel(row: _Row) -> SublevelDefinition:
    name, description, evidence, exit_criteria, (min_months, max_months) = row
    return SublevelDefinition(
        name=name,
        description=description,
        evidence_requirements=[
            EvidenceRequirement(type=EvidenceType(etype), description=desc, required=required)
            for etype, desc, required in evidence
        ],
        exit_criteria=list(exit_criteria),
        typical_duration=TypicalDuration(min=min_months, max=max_months),
    )


def _build_levels() -> Dict[int, LevelDefinition]:
    levels: Dict[int, LevelDefinition] = {}
    for level, (name, description, phase, rows) in _TRL_TABLE.items():
        levels[level] = LevelDefinition(
            level=level,
            name=name,
            description=description,
            phase=phase,
            sublevels={
                sublevel: _build_sublevel(row)
                for sublevel, row in zip(Sublevel, rows)
            },
        )
    return levels


TRL_LEVELS: Dict[int, LevelDefinition] = _build_levels()
